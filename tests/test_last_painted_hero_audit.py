import unittest

from heroaudit.audits.audit import DEFAULT_PASS, Audit, AuditContext, ScoringModes
from heroaudit.audits.metrics.last_painted_hero import UI_STRINGS, LastPaintedHero
from heroaudit.core.errors import ArtifactError
from heroaudit.core.logging import LogEmitter


def _artifacts(hero_paint_ms: float = 3200.0) -> dict:
    navstart = 5_000_000
    trace = {
        "traceEvents": [
            {"name": "TracingStartedInPage", "ph": "I", "ts": navstart - 10, "args": {"data": {"page": "F1"}}},
            {"name": "navigationStart", "ph": "R", "ts": navstart, "args": {"frame": "F1"}},
            {
                "name": "Paint",
                "ph": "X",
                "ts": navstart + int(hero_paint_ms * 1000),
                "args": {"data": {"frame": "F1", "nodeId": 7}},
            },
        ]
    }
    return {
        "traces": {DEFAULT_PASS: trace},
        "devtoolsLogs": {DEFAULT_PASS: []},
        "HeroElements": [
            {"nodeId": 7, "tagName": "IMG", "kind": "image", "boundingRect": {"top": 0, "left": 0, "width": 300, "height": 200}},
        ],
        "ViewportDimensions": {"innerWidth": 412, "innerHeight": 732},
    }


def _context(**options) -> AuditContext:
    merged = {**LastPaintedHero.default_options(), **options}
    return AuditContext(options=merged, settings={"throttling_method": "provided"})


class LastPaintedHeroMetaTests(unittest.TestCase):
    def test_meta(self) -> None:
        meta = LastPaintedHero.meta()
        self.assertEqual(meta["id"], "last-painted-hero")
        self.assertEqual(meta["title"], "Last Painted Hero")
        self.assertEqual(meta["description"], UI_STRINGS["description"])
        self.assertEqual(meta["score_display_mode"], ScoringModes.NUMERIC)
        self.assertEqual(
            meta["required_artifacts"],
            ["traces", "devtoolsLogs", "HeroElements", "ViewportDimensions"],
        )

    def test_default_options(self) -> None:
        self.assertEqual(LastPaintedHero.default_options(), {"score_podr": 2000, "score_median": 4000})


class LastPaintedHeroAuditTests(unittest.TestCase):
    def test_audit_product(self) -> None:
        product = LastPaintedHero.audit(_artifacts(3200.0), _context())
        self.assertAlmostEqual(product["raw_value"], 3200.0)
        self.assertEqual(product["score"], 0.7)
        self.assertEqual(product["display_value"], "3.2\u00a0s")

    def test_calibration_points(self) -> None:
        self.assertEqual(LastPaintedHero.audit(_artifacts(4000.0), _context())["score"], 0.5)
        self.assertEqual(LastPaintedHero.audit(_artifacts(2000.0), _context())["score"], 0.95)
        self.assertEqual(LastPaintedHero.audit(_artifacts(0.0), _context())["score"], 1.0)
        self.assertEqual(LastPaintedHero.audit(_artifacts(30000.0), _context())["score"], 0.0)

    def test_options_override_defaults(self) -> None:
        product = LastPaintedHero.audit(_artifacts(3200.0), _context(score_podr=1000, score_median=3200))
        self.assertEqual(product["score"], 0.5)

    def test_run_builds_result(self) -> None:
        result = LastPaintedHero.run(_artifacts(3200.0), _context())
        self.assertEqual(result["id"], "last-painted-hero")
        self.assertEqual(result["score"], 0.7)
        self.assertEqual(result["score_display_mode"], ScoringModes.NUMERIC)
        self.assertAlmostEqual(result["raw_value"], 3200.0)
        self.assertIsNone(result["error_message"])

    def test_run_missing_artifact(self) -> None:
        artifacts = _artifacts()
        del artifacts["HeroElements"]
        result = LastPaintedHero.run(artifacts, _context())
        self.assertIsNone(result["score"])
        self.assertEqual(result["score_display_mode"], ScoringModes.ERROR)
        self.assertEqual(result["error_message"], "Required HeroElements gatherer did not run.")

    def test_run_per_pass_artifact_without_default_pass(self) -> None:
        artifacts = _artifacts()
        artifacts["devtoolsLogs"] = {"secondPass": []}
        result = LastPaintedHero.run(artifacts, _context())
        self.assertEqual(result["score_display_mode"], ScoringModes.ERROR)
        self.assertEqual(result["error_message"], "Required devtoolsLogs gatherer did not run.")

        artifacts["devtoolsLogs"] = []
        result = LastPaintedHero.run(artifacts, _context())
        self.assertEqual(result["error_message"], "Required devtoolsLogs gatherer did not run.")

    def test_run_errored_artifact(self) -> None:
        artifacts = _artifacts()
        artifacts["traces"] = {DEFAULT_PASS: ArtifactError("traces", "tracing buffer overflow")}
        result = LastPaintedHero.run(artifacts, _context())
        self.assertEqual(result["score_display_mode"], ScoringModes.ERROR)
        self.assertEqual(
            result["error_message"],
            "Required traces gatherer encountered an error: tracing buffer overflow",
        )

    def test_run_metric_failure_is_error_result(self) -> None:
        artifacts = _artifacts()
        artifacts["traces"][DEFAULT_PASS]["traceEvents"] = artifacts["traces"][DEFAULT_PASS]["traceEvents"][:2]
        logger = LogEmitter(min_level="error")
        context = _context()
        context.logger = logger
        result = LastPaintedHero.run(artifacts, context)
        self.assertEqual(result["score_display_mode"], ScoringModes.ERROR)
        self.assertTrue(result["error_message"].startswith("Audit error:"))
        failed = [r for r in logger.records if r["context"]["event"] == "audit_failed"]
        self.assertEqual(failed[0]["context"]["details"]["code"], "HERO_NOT_PAINTED")


class LogNormalScoreTests(unittest.TestCase):
    def test_bounds_and_rounding(self) -> None:
        self.assertEqual(Audit.compute_log_normal_score(4000, 2000, 4000), 0.5)
        self.assertEqual(Audit.compute_log_normal_score(0, 2000, 4000), 1.0)
        self.assertEqual(Audit.compute_log_normal_score(10 ** 7, 2000, 4000), 0.0)

    def test_invalid_calibration(self) -> None:
        with self.assertRaises(ValueError):
            Audit.compute_log_normal_score(3000, 4000, 2000)


if __name__ == "__main__":
    unittest.main()
