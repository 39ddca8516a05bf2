"""Tests for insights.core.config: validation and env loading."""

import pytest

from insights.core.config import (
    DEFAULT_STEP_TABLE,
    AnalyticsConfig,
    config_from_env,
    getenv_default,
    getenv_required,
)
from insights.schemas.series import MAX_MEASUREMENT, BucketUnit, Period


ENV_KEYS = [
    "INSIGHTS_EXPRESSIVE_FLOOR",
    "INSIGHTS_THRESHOLD_FRACTIONS",
    "INSIGHTS_AXIS_HEADROOM",
    "INSIGHTS_STEP_TABLE",
    "INSIGHTS_STREAK_REQUIRES_TODAY",
    "INSIGHTS_DAY_WINDOW",
    "INSIGHTS_WEEK_WINDOW",
    "INSIGHTS_MONTH_WINDOW",
    "INSIGHTS_DAY_SUMMARY_DAYS",
    "INSIGHTS_WEEK_SUMMARY_DAYS",
    "INSIGHTS_MONTH_SUMMARY_DAYS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestValidation:
    def test_defaults(self):
        config = AnalyticsConfig()
        assert config.expressive_floor == 0.01
        assert config.threshold_fractions == (0.3, 0.6, 1.0)
        assert config.step_table == DEFAULT_STEP_TABLE
        assert config.window_for(Period.WEEK) == (BucketUnit.DAY, 7)
        assert not config.streak_requires_today

    @pytest.mark.parametrize("floor", [0.0, -1.0, float("nan"), float("inf")])
    def test_floor_must_be_positive_finite(self, floor):
        with pytest.raises(ValueError):
            AnalyticsConfig(expressive_floor=floor)

    @pytest.mark.parametrize(
        "fractions",
        [(0.3, 0.3, 1.0), (0.6, 0.3, 1.0), (0.0, 0.5, 1.0), (0.3, 0.6, 1.5), (0.3, 0.6)],
    )
    def test_fractions_must_be_strictly_ascending(self, fractions):
        with pytest.raises(ValueError):
            AnalyticsConfig(threshold_fractions=fractions)

    def test_headroom_cannot_drop_below_twenty_percent(self):
        with pytest.raises(ValueError):
            AnalyticsConfig(axis_headroom=1.1)

    @pytest.mark.parametrize("headroom", [10.5, 1e308])
    def test_headroom_is_capped(self, headroom):
        with pytest.raises(ValueError):
            AnalyticsConfig(axis_headroom=headroom)

    def test_floor_above_measurement_cap(self):
        with pytest.raises(ValueError):
            AnalyticsConfig(expressive_floor=MAX_MEASUREMENT * 2)

    @pytest.mark.parametrize("floor", [5e-324, 1e-323])
    def test_subnormal_floor_would_collapse_thresholds(self, floor):
        with pytest.raises(ValueError, match="distinct"):
            AnalyticsConfig(expressive_floor=floor)

    def test_summary_days_must_be_positive(self):
        with pytest.raises(ValueError):
            AnalyticsConfig(summary_days={Period.DAY: 1, Period.WEEK: 0, Period.MONTH: 30})

    @pytest.mark.parametrize(
        "table",
        [(), ((0.1, 0.02), (0.05, 0.01)), ((0.1, 0.02), (0.2, 0.01)), ((0.1, 0.0),)],
    )
    def test_step_table_must_be_ascending(self, table):
        with pytest.raises(ValueError):
            AnalyticsConfig(step_table=table)

    def test_windows_must_cover_every_period(self):
        with pytest.raises(ValueError):
            AnalyticsConfig(windows={Period.DAY: (BucketUnit.HOUR, 24)})

    def test_window_count_must_be_positive(self):
        windows = {
            Period.DAY: (BucketUnit.HOUR, 24),
            Period.WEEK: (BucketUnit.DAY, 0),
            Period.MONTH: (BucketUnit.DAY, 30),
        }
        with pytest.raises(ValueError):
            AnalyticsConfig(windows=windows)


class TestFromEnv:
    def test_defaults_when_unset(self, clean_env):
        assert config_from_env() == AnalyticsConfig()

    def test_reads_values(self, clean_env):
        clean_env.setenv("INSIGHTS_EXPRESSIVE_FLOOR", "0.02")
        clean_env.setenv("INSIGHTS_THRESHOLD_FRACTIONS", "0.2,0.5,0.9")
        clean_env.setenv("INSIGHTS_AXIS_HEADROOM", "1.5")
        clean_env.setenv("INSIGHTS_STEP_TABLE", "0.1:0.02,1:0.2")
        clean_env.setenv("INSIGHTS_STREAK_REQUIRES_TODAY", "yes")
        clean_env.setenv("INSIGHTS_MONTH_WINDOW", "week:5")

        config = config_from_env()
        assert config.expressive_floor == 0.02
        assert config.threshold_fractions == (0.2, 0.5, 0.9)
        assert config.axis_headroom == 1.5
        assert config.step_table == ((0.1, 0.02), (1.0, 0.2))
        assert config.streak_requires_today
        assert config.window_for(Period.MONTH) == (BucketUnit.WEEK, 5)

    def test_reads_summary_days(self, clean_env):
        clean_env.setenv("INSIGHTS_DAY_SUMMARY_DAYS", "2")
        clean_env.setenv("INSIGHTS_MONTH_SUMMARY_DAYS", "90")

        config = config_from_env()
        assert config.summary_days == {Period.DAY: 2, Period.WEEK: 7, Period.MONTH: 90}

    def test_process_env_wins_over_dotenv_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("INSIGHTS_EXPRESSIVE_FLOOR=0.5\n")
        clean_env.setenv("INSIGHTS_EXPRESSIVE_FLOOR", "0.02")

        config = config_from_env(env_path=str(env_file))
        assert config.expressive_floor == 0.02

    @pytest.mark.parametrize(
        "key, value",
        [
            ("INSIGHTS_EXPRESSIVE_FLOOR", "abc"),
            ("INSIGHTS_EXPRESSIVE_FLOOR", "-1"),
            ("INSIGHTS_THRESHOLD_FRACTIONS", "0.1,0.2"),
            ("INSIGHTS_STEP_TABLE", "0.1-0.02"),
            ("INSIGHTS_WEEK_WINDOW", "fortnight:2"),
            ("INSIGHTS_AXIS_HEADROOM", "1.0"),
            ("INSIGHTS_AXIS_HEADROOM", "1e308"),
            ("INSIGHTS_EXPRESSIVE_FLOOR", "5e-324"),
            ("INSIGHTS_WEEK_SUMMARY_DAYS", "seven"),
            ("INSIGHTS_WEEK_SUMMARY_DAYS", "0"),
        ],
    )
    def test_malformed_values_raise_runtime_error(self, clean_env, key, value):
        clean_env.setenv(key, value)
        with pytest.raises(RuntimeError):
            config_from_env()


class TestEnvHelpers:
    def test_required_missing(self, monkeypatch):
        monkeypatch.delenv("INSIGHTS_TEST_KEY", raising=False)
        with pytest.raises(RuntimeError, match="INSIGHTS_TEST_KEY missing"):
            getenv_required("INSIGHTS_TEST_KEY")

    def test_required_present(self, monkeypatch):
        monkeypatch.setenv("INSIGHTS_TEST_KEY", "v")
        assert getenv_required("INSIGHTS_TEST_KEY") == "v"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("INSIGHTS_TEST_KEY", raising=False)
        assert getenv_default("INSIGHTS_TEST_KEY", "fallback") == "fallback"
