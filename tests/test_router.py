"""
Purpose: Validate argv routing, runtime resolution, and error mapping of the bunb entry point.
Key Exports: None (unittest module).
Role: Cover the dispatcher decisions with spawning mocked out.
Invariants: No real child processes are started here.
"""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from bunb import _cli
from bunb import ErrorKind, RoutingUnreachableError, Settings
from bunb.payloads import BIOME_BINARY_NAME, bundled_biome, bundled_config
from bunb.settings import RUNTIME_MODE_ENV


class ClassificationTests(unittest.TestCase):
    def test_biome_commands_are_recognized(self) -> None:
        for command in ("format", "lint", "check", "ci"):
            with self.subTest(command=command):
                self.assertTrue(_cli.is_biome_command([command]))
                self.assertTrue(_cli.is_biome_command([command, "--write", "src"]))

    def test_other_first_arguments_go_to_runtime(self) -> None:
        for args in ([], ["install"], ["run", "lint"], ["--version"], ["Lint"], ["formatter"], [""]):
            with self.subTest(args=args):
                self.assertFalse(_cli.is_biome_command(args))


class DispatchTests(unittest.TestCase):
    def test_biome_command_uses_embedded_payloads(self) -> None:
        settings = Settings(biome_binary=Path("/opt/biome"), biome_config=Path("/opt/biome.json"))
        manager = mock.Mock()
        with mock.patch.object(_cli, "run_biome", return_value=3) as run_biome, mock.patch.object(
            _cli, "run_runtime"
        ) as run_runtime:
            code = _cli.dispatch(["check", "src"], settings, manager)

        self.assertEqual(code, 3)
        run_runtime.assert_not_called()
        args, manager_arg, binary, config = run_biome.call_args.args
        self.assertEqual(args, ["check", "src"])
        self.assertIs(manager_arg, manager)
        self.assertEqual(binary.path, Path("/opt/biome"))
        self.assertEqual(config.path, Path("/opt/biome.json"))

    def test_other_commands_forward_unmodified_to_runtime(self) -> None:
        settings = Settings()
        with mock.patch.object(_cli, "run_runtime", return_value=0) as run_runtime, mock.patch.object(
            _cli, "run_biome"
        ) as run_biome:
            _cli.dispatch(["install", "--frozen-lockfile"], settings)

        run_biome.assert_not_called()
        run_runtime.assert_called_once_with(["install", "--frozen-lockfile"], settings)

    def test_runtime_mode_marker_skips_routing(self) -> None:
        settings = Settings(runtime_mode=True)
        with mock.patch.object(_cli, "run_runtime", return_value=0) as run_runtime, mock.patch.object(
            _cli, "run_biome"
        ) as run_biome:
            _cli.dispatch(["lint", "src"], settings)

        run_biome.assert_not_called()
        run_runtime.assert_called_once_with(["lint", "src"], settings)

    def test_run_biome_appends_config_args(self) -> None:
        manager = mock.Mock()
        manager.executable_path.return_value = Path("/tmp/biome-1")
        manager.resolve_config.return_value = ["--config-path", "/tmp/biome-config-1.json"]
        with mock.patch.object(_cli, "_spawn", return_value=0) as spawn:
            _cli.run_biome(["lint", "--help"], manager, bundled_biome(), bundled_config(), Path("/work"))

        spawn.assert_called_once_with(
            [str(Path("/tmp/biome-1")), "lint", "--help", "--config-path", "/tmp/biome-config-1.json"]
        )
        manager.resolve_config.assert_called_once_with(mock.ANY, Path("/work"))

    def test_run_runtime_sets_mode_marker(self) -> None:
        settings = Settings(runtime="/usr/local/bin/bun")
        with mock.patch.dict(os.environ, {"KEEP_ME": "1"}, clear=False), mock.patch.object(
            _cli, "_spawn", return_value=0
        ) as spawn:
            _cli.run_runtime(["install"], settings)

        cmd, env = spawn.call_args.args
        self.assertEqual(cmd, ["/usr/local/bin/bun", "install"])
        self.assertEqual(env[RUNTIME_MODE_ENV], "1")
        self.assertEqual(env["KEEP_ME"], "1")


class RuntimeResolutionTests(unittest.TestCase):
    def test_explicit_runtime_wins(self) -> None:
        with mock.patch.object(_cli.shutil, "which", return_value="/usr/bin/bun"):
            self.assertEqual(_cli.resolve_runtime(Settings(runtime="/custom/bun")), "/custom/bun")

    def test_runtime_found_on_path(self) -> None:
        with mock.patch.object(_cli.shutil, "which", return_value="/usr/bin/bun"):
            self.assertEqual(_cli.resolve_runtime(Settings()), "/usr/bin/bun")

    def test_missing_runtime_is_unreachable(self) -> None:
        with mock.patch.object(_cli.shutil, "which", return_value=None):
            with self.assertRaises(RoutingUnreachableError) as ctx:
                _cli.resolve_runtime(Settings())
        self.assertEqual(ctx.exception.kind, ErrorKind.ROUTING_UNREACHABLE)
        self.assertEqual(ctx.exception.exit_code, 127)


class SpawnTests(unittest.TestCase):
    def test_missing_executable_maps_to_127(self) -> None:
        with mock.patch.object(_cli.subprocess, "Popen", side_effect=FileNotFoundError(2, "No such file")):
            with self.assertRaises(RoutingUnreachableError) as ctx:
                _cli._spawn(["/nope/bun"])
        self.assertEqual(ctx.exception.exit_code, 127)
        self.assertEqual(ctx.exception.path, "/nope/bun")

    def test_permission_denied_maps_to_126(self) -> None:
        with mock.patch.object(_cli.subprocess, "Popen", side_effect=PermissionError(13, "Permission denied")):
            with self.assertRaises(RoutingUnreachableError) as ctx:
                _cli._spawn(["/tmp/biome-1"])
        self.assertEqual(ctx.exception.exit_code, 126)

    def test_exit_code_is_propagated(self) -> None:
        proc = mock.Mock()
        proc.wait.return_value = 7
        with mock.patch.object(_cli.subprocess, "Popen", return_value=proc):
            self.assertEqual(_cli._spawn(["bun"]), 7)

    def test_signal_death_maps_to_shell_convention(self) -> None:
        proc = mock.Mock()
        proc.wait.return_value = -15
        with mock.patch.object(_cli.subprocess, "Popen", return_value=proc):
            self.assertEqual(_cli._spawn(["bun"]), 143)


class MainTests(unittest.TestCase):
    def test_internal_failure_prints_diagnostic(self) -> None:
        stderr = io.StringIO()
        error = RoutingUnreachableError("bun runtime not found; install bun or set BUNB_RUNTIME")
        with mock.patch.object(_cli, "dispatch", side_effect=error), mock.patch("sys.stderr", stderr):
            code = _cli.main(["install"])

        self.assertEqual(code, 127)
        self.assertEqual(stderr.getvalue(), "bunb: bun runtime not found; install bun or set BUNB_RUNTIME\n")

    def test_interrupt_while_waiting_exits_130(self) -> None:
        stderr = io.StringIO()
        with mock.patch.object(_cli, "dispatch", side_effect=KeyboardInterrupt), mock.patch("sys.stderr", stderr):
            self.assertEqual(_cli.main(["run", "dev"]), 130)
        self.assertEqual(stderr.getvalue(), "")

    def test_unreadable_payload_prints_diagnostic(self) -> None:
        stderr = io.StringIO()
        with tempfile.TemporaryDirectory(prefix="bunb-main-") as tmp:
            env = {"BUNB_BIOME_BINARY": tmp, "BUNB_TMPDIR": tmp, RUNTIME_MODE_ENV: ""}
            with mock.patch.dict(os.environ, env, clear=False), mock.patch("sys.stderr", stderr):
                code = _cli.main(["lint"])

        self.assertEqual(code, 66)
        self.assertTrue(stderr.getvalue().startswith("bunb: cannot read embedded biome at "))
        self.assertEqual(len(stderr.getvalue().splitlines()), 1)

    def test_main_reads_settings_from_environment(self) -> None:
        env = {"BUNB_RUNTIME": "/custom/bun", RUNTIME_MODE_ENV: ""}
        with mock.patch.dict(os.environ, env, clear=False), mock.patch.object(
            _cli, "dispatch", return_value=5
        ) as dispatch:
            self.assertEqual(_cli.main(["x"]), 5)
        args, settings = dispatch.call_args.args
        self.assertEqual(args, ["x"])
        self.assertEqual(settings.runtime, "/custom/bun")
        self.assertFalse(settings.runtime_mode)


class SettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        self.assertIsNone(settings.runtime)
        self.assertIsNone(settings.temp_dir)
        self.assertEqual(settings.log_level, "WARNING")
        self.assertFalse(settings.runtime_mode)

    def test_overrides(self) -> None:
        settings = Settings.from_env(
            {
                "BUNB_RUNTIME": "/opt/bun",
                "BUNB_BIOME_BINARY": "/opt/biome",
                "BUNB_BIOME_CONFIG": "/opt/biome.json",
                "BUNB_TMPDIR": "/var/tmp/bunb",
                "BUNB_LOG_LEVEL": "debug",
                "BUN_BE_BUN": "1",
            }
        )
        self.assertEqual(settings.runtime, "/opt/bun")
        self.assertEqual(settings.biome_binary, Path("/opt/biome"))
        self.assertEqual(settings.biome_config, Path("/opt/biome.json"))
        self.assertEqual(settings.temp_dir, Path("/var/tmp/bunb"))
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertTrue(settings.runtime_mode)

    def test_bundled_payload_defaults_live_in_package(self) -> None:
        payload = bundled_biome()
        self.assertEqual(payload.path.name, BIOME_BINARY_NAME)
        self.assertEqual(payload.path.parent.name, "_embedded")
        self.assertTrue(bundled_config().exists())


if __name__ == "__main__":
    unittest.main()
