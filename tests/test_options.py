"""Test option validation."""

import pytest

from optimjax import IpnewtonOptions, KktOptions, OptimumOptions, OutputterOptions


class TestOptions:
    
    def test_defaults(self):
        options = OptimumOptions()
        
        assert options.tolerance == 1e-6
        assert options.max_iterations == 200
        assert options.output.active is False
        assert options.ipnewton.uniform_newton_step is False
        assert 0.0 < options.ipnewton.tau < 1.0
    
    def test_zero_tolerance_allowed(self):
        assert OptimumOptions(tolerance=0.0).tolerance == 0.0
    
    @pytest.mark.parametrize(
        "factory",
        [
            lambda: OptimumOptions(tolerance=-1.0),
            lambda: OptimumOptions(max_iterations=0),
            lambda: IpnewtonOptions(mu=0.0),
            lambda: IpnewtonOptions(mux=-1e-8),
            lambda: IpnewtonOptions(tau=1.0),
            lambda: IpnewtonOptions(tau=0.0),
            lambda: KktOptions(regularization=-1.0),
            lambda: KktOptions(iterative_tol=0.0),
            lambda: KktOptions(iterative_maxiter=0),
            lambda: OutputterOptions(width=0),
            lambda: OutputterOptions(precision=-1),
        ],
    )
    def test_invalid_values_rejected(self, factory):
        with pytest.raises(ValueError):
            factory()
    
    def test_options_are_frozen(self):
        options = OptimumOptions()
        with pytest.raises(AttributeError):
            options.tolerance = 1.0

    @pytest.mark.parametrize("options_type", [OutputterOptions, IpnewtonOptions, KktOptions, OptimumOptions])
    def test_every_field_documented(self, options_type):
        doc = options_type.__doc__
        assert "Args:" in doc
        for name in options_type.__dataclass_fields__:
            assert f"{name}:" in doc


if __name__ == "__main__":
    pytest.main([__file__])
