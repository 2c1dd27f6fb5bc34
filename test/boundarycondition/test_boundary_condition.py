import numpy as np
import pytest

from flowfem.boundarycondition import BCKind, BoundaryConditionPolicy
from flowfem.boundarycondition import ParabolicInletProfile, natural_policy
from flowfem.errors import UnknownMarkerError, ConfigurationError


class TestBoundaryConditionPolicy:
    def policy(self):
        kinds = {1: BCKind.ESSENTIAL, 2: 'natural', 3: BCKind.ESSENTIAL, 4: 'essential'}
        values = {4: lambda x, y, t: x + y + t, 3: 2.5}
        return BoundaryConditionPolicy(kinds, values=values, field='xvel')

    def test_kinds(self):
        policy = self.policy()
        assert policy.markers() == [1, 2, 3, 4]
        assert policy.essential_markers() == [1, 3, 4]
        assert policy.kind_for(2) is BCKind.NATURAL
        assert policy.is_essential(np.int64(4))
        assert not policy.is_essential(2)

    def test_unknown_marker(self):
        policy = self.policy()
        with pytest.raises(UnknownMarkerError) as excinfo:
            policy.kind_for(9)
        assert excinfo.value.marker == 9
        assert excinfo.value.field == 'xvel'
        assert "9" in str(excinfo.value) and "xvel" in str(excinfo.value)
        assert isinstance(excinfo.value, ConfigurationError)

    def test_values(self):
        policy = self.policy()
        x = np.array([0.0, 1.0, 2.0])
        y = np.array([1.0, 1.0, 0.0])
        np.testing.assert_allclose(policy.value_at(1, x, y, 0.3), 0.0)
        np.testing.assert_allclose(policy.value_at(3, x, y, 0.3), 2.5)
        np.testing.assert_allclose(policy.value_at(4, x, y, 0.5), x + y + 0.5)
        assert policy.value_at(3, x, y, 0.0).shape == (3, )
        with pytest.raises(ValueError):
            policy.value_at(2, x, y, 0.0)

    def test_value_on_natural_marker(self):
        with pytest.raises(ValueError):
            BoundaryConditionPolicy({1: BCKind.NATURAL}, values={1: 1.0})

    def test_natural_policy(self):
        policy = natural_policy([1, 2, 3], field='press')
        assert policy.essential_markers() == []
        assert all(policy.kind_for(m) is BCKind.NATURAL for m in [1, 2, 3])


class TestParabolicInletProfile:
    @pytest.mark.parametrize("t, ramp", [(0.0, 0.0), (0.25, 0.125), (0.5, 0.25), (2.0, 1.0), (5.0, 1.0)])
    def test_ramp(self, t, ramp):
        profile = ParabolicInletProfile(1.5, 10.0, 2.0)
        assert profile.ramp(t) == pytest.approx(ramp)

    def test_profile(self):
        H = 10.0
        profile = ParabolicInletProfile(1.0, H, 1.0)
        y = np.linspace(0, H, 11)
        x = np.zeros_like(y)
        val = profile(x, y, 3.0)
        np.testing.assert_allclose(val, 4*y*(H - y)/H**2)
        assert val[0] == 0.0 and val[-1] == 0.0
        assert val[5] == pytest.approx(1.0)
        np.testing.assert_allclose(profile(x, y, 0.5), 0.5*val)
