import json
import os
import tempfile
import unittest

from hitcounter import (
    NS_PER_SECOND,
    ConfigError,
    CounterConfig,
    InvalidDuration,
    ManualClock,
    build_counter,
    load_config,
)


class CounterConfigTests(unittest.TestCase):
    def test_defaults(self):
        cfg = CounterConfig()
        self.assertEqual(cfg.duration_ns, 60 * NS_PER_SECOND)
        self.assertEqual(cfg.resolution_ns, NS_PER_SECOND)
        self.assertFalse(cfg.consistent_reads)
        self.assertEqual(cfg.log_level, "INFO")

    def test_seconds_are_converted(self):
        cfg = CounterConfig(duration_seconds=5, resolution_seconds=0.5)
        self.assertEqual(cfg.duration_ns, 5 * NS_PER_SECOND)
        self.assertEqual(cfg.resolution_ns, NS_PER_SECOND // 2)

    def test_nanoseconds_are_converted(self):
        cfg = CounterConfig(duration_ns=3 * NS_PER_SECOND, resolution_ns=NS_PER_SECOND)
        self.assertEqual(cfg.duration_seconds, 3)
        self.assertEqual(cfg.resolution_seconds, 1)

    def test_nanoseconds_win_when_both_given(self):
        cfg = CounterConfig(duration_ns=2 * NS_PER_SECOND, duration_seconds=10)
        self.assertEqual(cfg.duration_ns, 2 * NS_PER_SECOND)
        self.assertEqual(cfg.duration_seconds, 2)

    def test_log_level_normalized(self):
        self.assertEqual(CounterConfig(log_level="debug").log_level, "DEBUG")
        with self.assertRaises(ConfigError):
            CounterConfig(log_level="chatty")

    def test_from_dict_rejects_unknown_keys(self):
        with self.assertRaises(ConfigError) as ctx:
            CounterConfig.from_dict({"duration_seconds": 5, "keys": ["a"]})
        self.assertIn("keys", str(ctx.exception))

    def test_from_dict_rejects_non_mapping(self):
        with self.assertRaises(ConfigError):
            CounterConfig.from_dict(["duration_seconds", 5])

    def test_from_dict_rejects_bad_values(self):
        with self.assertRaises(ConfigError):
            CounterConfig.from_dict({"duration_seconds": "soon"})

    def test_round_trip_through_dict(self):
        cfg = CounterConfig(duration_seconds=10, resolution_seconds=2, consistent_reads=True)
        self.assertEqual(CounterConfig.from_dict(cfg.to_dict()), cfg)


class LoadConfigTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_yaml_top_level(self):
        path = self.write("counter.yaml", "duration_seconds: 5\nresolution_seconds: 1\n")
        cfg = load_config(path)
        self.assertEqual(cfg.duration_ns, 5 * NS_PER_SECOND)

    def test_yaml_nested_under_counter(self):
        path = self.write(
            "app.yml",
            "counter:\n  duration_ns: 10000000000\n  resolution_ns: 2000000000\n  consistent_reads: true\n",
        )
        cfg = load_config(path)
        self.assertEqual(cfg.duration_ns, 10 * NS_PER_SECOND)
        self.assertEqual(cfg.resolution_ns, 2 * NS_PER_SECOND)
        self.assertTrue(cfg.consistent_reads)

    def test_json(self):
        path = self.write("counter.json", json.dumps({"duration_seconds": 3, "log_level": "warning"}))
        cfg = load_config(path)
        self.assertEqual(cfg.duration_ns, 3 * NS_PER_SECOND)
        self.assertEqual(cfg.log_level, "WARNING")

    def test_empty_file_uses_defaults(self):
        path = self.write("empty.yaml", "")
        with self.assertLogs("hitcounter.config", level="WARNING"):
            cfg = load_config(path)
        self.assertEqual(cfg, CounterConfig())

    def test_malformed_yaml(self):
        path = self.write("bad.yaml", "duration_seconds: [5\n")
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_malformed_json(self):
        path = self.write("bad.json", "{")
        with self.assertRaises(ConfigError):
            load_config(path)


class BuildCounterTests(unittest.TestCase):
    def test_builds_counter(self):
        clock = ManualClock(0)
        counter = build_counter(CounterConfig(duration_seconds=5, resolution_seconds=1), clock=clock)
        self.assertEqual(counter.get_duration(), 5 * NS_PER_SECOND)
        self.assertIs(counter.clock, clock)
        counter.add_hit()
        self.assertEqual(counter.get_hits(), 1)

    def test_inconsistent_config_raises_invalid_duration(self):
        with self.assertRaises(InvalidDuration):
            build_counter(CounterConfig(duration_seconds=10, resolution_seconds=3))


if __name__ == "__main__":
    unittest.main()
