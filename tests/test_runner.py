import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

import yaml

from heroaudit.audits.audit import DEFAULT_PASS
from heroaudit.core.artifacts import load_artifacts
from heroaudit.core.config import load_config
from heroaudit.core.logging import LogEmitter
from heroaudit.main.run import main, run_audits


FIXTURES = Path(__file__).resolve().parent / "fixtures"
BUNDLE = str(FIXTURES / "lph_artifacts.json")


def _run_main(argv):
    out = io.StringIO()
    err = io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class RunAuditsTests(unittest.TestCase):
    def test_runs_enabled_audits(self) -> None:
        logger = LogEmitter(min_level="error")
        results = run_audits(load_artifacts(BUNDLE), load_config(None), logger)
        self.assertEqual([r["id"] for r in results], ["last-painted-hero"])
        self.assertEqual(results[0]["score"], 0.7)
        self.assertAlmostEqual(results[0]["raw_value"], 3200.0)
        events = [r["context"]["event"] for r in logger.records]
        self.assertEqual(events.count("audit_started"), 1)
        self.assertEqual(events.count("audit_completed"), 1)

    def test_configured_options_reach_audit(self) -> None:
        cfg = load_config(None)
        cfg["audits"]["last-painted-hero"]["options"] = {"score_podr": 1600, "score_median": 3200}
        results = run_audits(load_artifacts(BUNDLE), cfg)
        self.assertEqual(results[0]["score"], 0.5)

    def test_disabled_audit_is_skipped(self) -> None:
        cfg = load_config(None)
        cfg["audits"]["last-painted-hero"]["enabled"] = False
        self.assertEqual(run_audits(load_artifacts(BUNDLE), cfg), [])
        # Explicit selection wins over the enabled flag.
        selected = run_audits(load_artifacts(BUNDLE), cfg, audit_ids=["last-painted-hero"])
        self.assertEqual(len(selected), 1)

    def test_unknown_audit_id(self) -> None:
        with self.assertRaises(ValueError):
            run_audits(load_artifacts(BUNDLE), load_config(None), audit_ids=["speed-index"])


class MainTests(unittest.TestCase):
    def test_cli_writes_run_outputs(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            code, out, _ = _run_main(["--artifacts", BUNDLE, "--output-dir", td, "--run-id", "cli"])
            self.assertEqual(code, 0)
            printed = json.loads(out)
            self.assertEqual(printed["audits"]["last-painted-hero"]["display_value"], "3.2\u00a0s")
            run_dir = Path(td) / "cli"
            saved = json.loads((run_dir / "results.json").read_text(encoding="utf-8"))
            self.assertEqual(saved["audits"]["last-painted-hero"]["score"], 0.7)
            events = (run_dir / "logs" / "events.jsonl").read_text(encoding="utf-8").splitlines()
            names = [json.loads(line)["context"]["event"] for line in events]
            self.assertIn("artifacts_loaded", names)
            self.assertIn("audit_completed", names)
            self.assertTrue(all(json.loads(line)["run_id"] == "cli" for line in events))

    def test_cli_error_result_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            bundle = json.loads(Path(BUNDLE).read_text(encoding="utf-8"))
            bundle["traces"] = {DEFAULT_PASS: str(FIXTURES / "lph_trace.json")}
            del bundle["ViewportDimensions"]
            path = Path(td) / "bundle.json"
            path.write_text(json.dumps(bundle), encoding="utf-8")
            code, out, _ = _run_main(["--artifacts", str(path), "--no-artifacts-dir"])
        self.assertEqual(code, 1)
        result = json.loads(out)["audits"]["last-painted-hero"]
        self.assertEqual(result["score_display_mode"], "error")
        self.assertEqual(result["error_message"], "Required ViewportDimensions gatherer did not run.")

    def test_cli_bad_config_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg_path = Path(td) / "cfg.yaml"
            cfg_path.write_text(yaml.safe_dump({"settings": {"throttling_method": "warp"}}), encoding="utf-8")
            code, out, err = _run_main(["--artifacts", BUNDLE, "--config", str(cfg_path), "--no-artifacts-dir"])
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("validation_failed", err)

    def test_cli_malformed_yaml_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg_path = Path(td) / "cfg.yaml"
            cfg_path.write_text("audits: [unclosed", encoding="utf-8")
            code, out, err = _run_main(["--artifacts", BUNDLE, "--config", str(cfg_path), "--no-artifacts-dir"])
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("validation_failed", err)
        self.assertIn("invalid YAML", err)

    def test_cli_trace_without_default_pass(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            bundle = json.loads(Path(BUNDLE).read_text(encoding="utf-8"))
            bundle["traces"] = {"secondPass": str(FIXTURES / "lph_trace.json")}
            path = Path(td) / "bundle.json"
            path.write_text(json.dumps(bundle), encoding="utf-8")
            code, out, _ = _run_main(["--artifacts", str(path), "--no-artifacts-dir"])
        self.assertEqual(code, 1)
        result = json.loads(out)["audits"]["last-painted-hero"]
        self.assertEqual(result["error_message"], "Required traces gatherer did not run.")

    def test_cli_missing_bundle_and_unknown_audit(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            code, _, err = _run_main(["--artifacts", str(Path(td) / "nope.json"), "--no-artifacts-dir"])
            self.assertEqual(code, 2)
            self.assertIn("artifacts_failed", err)
            code, _, err = _run_main(["--artifacts", BUNDLE, "--audit", "speed-index", "--no-artifacts-dir"])
            self.assertEqual(code, 2)
            self.assertIn("invalid_audit", err)


if __name__ == "__main__":
    unittest.main()
