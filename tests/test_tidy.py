"""Tests for tidy, glance, augment and the generic accessors."""
import numpy as np
import pytest

from regression_walkthrough.models.fitting import fit_glm
from regression_walkthrough.models.tidy import (
    TIDY_COLUMNS,
    augment,
    coefficients,
    confidence_intervals,
    fitted_values,
    glance,
    residuals,
    tidy,
)


class TestTidy:
    """Test suite for the per-term table."""

    def test_columns_and_values(self, linear_model):
        out = tidy(linear_model)
        result = linear_model.result

        assert list(out.columns) == TIDY_COLUMNS
        assert out["term"].tolist() == list(result.params.index)
        np.testing.assert_allclose(out["estimate"], result.params)
        np.testing.assert_allclose(out["std_error"], result.bse)
        np.testing.assert_allclose(out["p_value"], result.pvalues)

    def test_interval_follows_level(self, linear_model):
        """Test that a 90% interval is narrower than a 99% one and matches conf_int."""
        narrow = tidy(linear_model, conf_level=0.90)
        wide = tidy(linear_model, conf_level=0.99)
        ci = linear_model.result.conf_int(alpha=0.10)

        np.testing.assert_allclose(narrow["conf_low"], ci[0])
        assert ((wide["conf_high"] - wide["conf_low"]) > (narrow["conf_high"] - narrow["conf_low"])).all()

    def test_exponentiate_gives_odds_ratios(self, logistic_model):
        raw = tidy(logistic_model)
        odds = tidy(logistic_model, exponentiate=True)

        np.testing.assert_allclose(odds["estimate"], np.exp(raw["estimate"]))
        np.testing.assert_allclose(odds["conf_low"], np.exp(raw["conf_low"]))
        np.testing.assert_allclose(odds["std_error"], np.exp(raw["estimate"]) * raw["std_error"])
        np.testing.assert_allclose(odds["p_value"], raw["p_value"])

    def test_accepts_raw_results(self, linear_model):
        assert tidy(linear_model.result).equals(tidy(linear_model))

    @pytest.mark.parametrize("level", [0, 1, 1.5])
    def test_rejects_bad_level(self, linear_model, level):
        with pytest.raises(ValueError, match="conf_level"):
            tidy(linear_model, conf_level=level)


class TestGlance:
    """Test suite for the model-level table."""

    def test_ols_statistics(self, linear_model):
        row = glance(linear_model).iloc[0]
        result = linear_model.result

        assert row["nobs"] == 400
        assert row["r_squared"] == pytest.approx(result.rsquared)
        assert row["sigma"] == pytest.approx(np.sqrt(result.scale))
        assert row["aic"] == pytest.approx(result.aic)
        assert np.isnan(row["pseudo_r_squared"])

    def test_logit_statistics(self, logistic_model):
        row = glance(logistic_model).iloc[0]

        assert np.isnan(row["r_squared"])
        assert 0 < row["pseudo_r_squared"] < 1
        assert row["deviance"] < row["null_deviance"]

    def test_glm_statistics(self, turnout_df):
        row = glance(fit_glm("voted ~ age + education", turnout_df, family="binomial")).iloc[0]

        assert 0 < row["pseudo_r_squared"] < 1
        assert row["deviance"] < row["null_deviance"]


class TestAugment:
    """Test suite for the observation-level table."""

    def test_ols_columns(self, linear_model):
        out = augment(linear_model)

        for col in (".fitted", ".resid", ".hat", ".std_resid", ".cooksd"):
            assert col in out.columns
        assert len(out) == len(linear_model.data)
        np.testing.assert_allclose(out[".fitted"] + out[".resid"], out["earnings"])
        assert out[".hat"].sum() == pytest.approx(linear_model.result.df_model + 1)

    def test_logit_fitted_are_probabilities(self, logistic_model):
        out = augment(logistic_model)

        assert out[".fitted"].between(0, 1).all()
        np.testing.assert_allclose(1 / (1 + np.exp(-out[".linear_predictor"])), out[".fitted"])


class TestAccessors:
    """Test suite for the one-piece-at-a-time accessors."""

    def test_coefficients_and_intervals(self, linear_model):
        coef = coefficients(linear_model)
        ci = confidence_intervals(linear_model)

        assert list(ci.columns) == ["conf_low", "conf_high"]
        assert (ci["conf_low"] < coef).all()
        assert (coef < ci["conf_high"]).all()

    def test_fitted_and_residuals(self, logistic_model, linear_model):
        assert fitted_values(logistic_model).between(0, 1).all()
        np.testing.assert_allclose(residuals(linear_model), linear_model.result.resid)
