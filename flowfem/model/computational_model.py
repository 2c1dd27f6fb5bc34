import logging

from ..logs import TqdmLoggingHandler


__all__ = ['ComputationalModel', ]


class ComputationalModel:
    """Base class of the simulation drivers.

    Every model owns a logger named after its class. With ``pbar_log`` the
    records go through ``tqdm.write`` so that they interleave cleanly with a
    progress bar.
    """
    def __init__(self, pbar_log=False, log_level="WARNING"):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.propagate = False
        self.logger.setLevel(log_level)

        if not self.logger.handlers:
            if pbar_log:
                self.logger.addHandler(TqdmLoggingHandler())
            else:
                from ..logs import handler
                self.logger.addHandler(handler)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}()"
