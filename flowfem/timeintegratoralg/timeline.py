class UniformTimeLine():
    def __init__(self, T0, T1, NT):
        """
        Parameter
        ---------
        T0: the initial time
        T1: the end time
        NT: the number of time segments
        """
        if NT < 1:
            raise ValueError(f"the number of time segments must be positive, got {NT}")
        self.T0 = T0
        self.T1 = T1
        self.NL = NT + 1 # the number of time levels
        self.dt = (self.T1 - self.T0)/NT
        self.current = int(0)

    def number_of_time_steps(self):
        return self.NL - 1

    def current_time_level_index(self):
        return self.current

    def current_time_level(self):
        return self.T0 + self.current*self.dt

    def next_time_level(self):
        return self.T0 + (self.current + 1)*self.dt

    def stop(self):
        return self.current >= self.NL - 1

    def advance(self):
        self.current += 1
