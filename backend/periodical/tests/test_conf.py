"""Tests for task configuration resolution."""

from __future__ import annotations

from unittest.mock import patch

from django.test import SimpleTestCase, override_settings

from periodical import conf
from periodical.conf import TASK_DEFAULTS, env_overrides, parse_overrides, resolve_config
from periodical.errors import ConfigurationError


def _work():
    return None


class ParseOverridesTests(SimpleTestCase):
    def test_empty_values_have_no_overrides(self):
        """Absent or empty PERIODICAL means no overrides."""
        self.assertEqual(parse_overrides(None), {})
        self.assertEqual(parse_overrides(""), {})

    def test_name_only_activates(self):
        """A bare name activates the task without touching its interval."""
        self.assertEqual(parse_overrides("cleanup"), {"cleanup": {"active": True}})

    def test_name_with_interval(self):
        """name:interval activates and sets execution_interval."""
        overrides = parse_overrides("cleanup:300,report")
        self.assertEqual(overrides["cleanup"], {"active": True, "execution_interval": 300})
        self.assertEqual(overrides["report"], {"active": True})

    def test_ignores_blank_entries_and_whitespace(self):
        """Stray commas and spaces are tolerated."""
        overrides = parse_overrides(" cleanup:5 , ,report ")
        self.assertEqual(set(overrides), {"cleanup", "report"})
        self.assertEqual(overrides["cleanup"]["execution_interval"], 5)

    def test_non_integer_interval_is_a_configuration_error(self):
        """Malformed intervals fail loudly instead of being ignored."""
        with self.assertRaises(ConfigurationError) as ctx:
            parse_overrides("cleanup:soon")
        self.assertIn("cleanup:soon", str(ctx.exception))

    def test_missing_interval_after_colon_is_a_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            parse_overrides("cleanup:")


class EnvOverridesCacheTests(SimpleTestCase):
    def test_parsed_once_and_cached(self):
        """Later setting changes are not observed once parsed."""
        with patch.object(conf, "_ENV_OVERRIDES", None):
            with override_settings(PERIODICAL="cleanup:9"):
                first = env_overrides()
            with override_settings(PERIODICAL="report"):
                second = env_overrides()

        self.assertEqual(first, {"cleanup": {"active": True, "execution_interval": 9}})
        self.assertIs(first, second)

    def test_malformed_setting_raises(self):
        with patch.object(conf, "_ENV_OVERRIDES", None):
            with override_settings(PERIODICAL="cleanup:x"):
                with self.assertRaises(ConfigurationError):
                    env_overrides()


class ResolveConfigTests(SimpleTestCase):
    def test_defaults(self):
        """Without overrides or options the built-in defaults apply."""
        config = resolve_config("x", work=_work, description="X")

        self.assertEqual(config.name, "x")
        self.assertEqual(config.description, "X")
        self.assertIs(config.work, _work)
        self.assertEqual(config.execution_interval, 60)
        self.assertEqual(config.timeout_interval, 10)
        self.assertFalse(config.active)
        self.assertTrue(config.run_immediately_on_start)
        self.assertFalse(config.consistent_start_time)

    def test_env_override_beats_defaults(self):
        config = resolve_config("x", work=_work, env_overrides=parse_overrides("x:9"))
        self.assertTrue(config.active)
        self.assertEqual(config.execution_interval, 9)

    def test_env_override_for_other_task_is_ignored(self):
        config = resolve_config("x", work=_work, env_overrides=parse_overrides("y:9"))
        self.assertFalse(config.active)
        self.assertEqual(config.execution_interval, 60)

    def test_call_options_beat_env_override(self):
        """Explicit options win over PERIODICAL, which wins over defaults."""
        config = resolve_config(
            "x",
            work=_work,
            env_overrides=parse_overrides("x:9"),
            options={"execution_interval": 5},
        )
        self.assertEqual(config.execution_interval, 5)
        self.assertTrue(config.active)

    def test_call_options_can_deactivate(self):
        config = resolve_config(
            "x",
            work=_work,
            env_overrides=parse_overrides("x"),
            options={"active": False},
        )
        self.assertFalse(config.active)

    def test_unknown_option_is_rejected(self):
        with self.assertRaises(ConfigurationError) as ctx:
            resolve_config("x", work=_work, options={"interval": 5})
        self.assertIn("interval", str(ctx.exception))

    def test_work_and_description_cannot_be_options(self):
        with self.assertRaises(ConfigurationError):
            resolve_config("x", work=_work, options={"work": _work})

    def test_non_positive_interval_is_rejected(self):
        with self.assertRaises(ConfigurationError):
            resolve_config("x", work=_work, env_overrides=parse_overrides("x:0"))
        with self.assertRaises(ConfigurationError):
            resolve_config("x", work=_work, options={"timeout_interval": -1})

    def test_boolean_interval_is_rejected(self):
        with self.assertRaises(ConfigurationError):
            resolve_config("x", work=_work, options={"execution_interval": True})

    def test_string_flags_are_rejected(self):
        with self.assertRaises(ConfigurationError) as ctx:
            resolve_config("x", work=_work, options={"active": "false"})
        self.assertIn("active", str(ctx.exception))
        with self.assertRaises(ConfigurationError):
            resolve_config("x", work=_work, options={"consistent_start_time": 1})

    def test_fractional_intervals_are_allowed(self):
        config = resolve_config("x", work=_work, options={"execution_interval": 0.5, "timeout_interval": 0.25})
        self.assertEqual(config.execution_interval, 0.5)
        self.assertEqual(config.timeout_interval, 0.25)

    def test_custom_defaults(self):
        defaults = dict(TASK_DEFAULTS, timeout_interval=30)
        config = resolve_config("x", work=_work, defaults=defaults)
        self.assertEqual(config.timeout_interval, 30)

    def test_config_is_immutable(self):
        config = resolve_config("x", work=_work)
        with self.assertRaises(AttributeError):
            config.execution_interval = 1  # type: ignore[misc]
