import tempfile
import unittest
from pathlib import Path

from audify_plus import init
from audify_plus.config import LoaderSettings, Settings
from audify_plus.constants import CONSTANT_TABLES, OpusApplication
from audify_plus.errors import ArtifactNotFound, LoadFailure, UnsupportedPlatform
from audify_plus.platforms import PLATFORM_MAP, HostPlatform
from fakes import FakeFileSystem, OpusEncoderStub, native_stub


def _settings(root: Path) -> Settings:
    return Settings(loader=LoaderSettings(root=root))


class TestRuntime(unittest.TestCase):
    def test_linux_x64_end_to_end(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            path = root / "prebuilds" / "linux-x64" / "build" / "Release" / "audify.node"
            path.parent.mkdir(parents=True)
            path.write_bytes(b"x")
            seen: list[tuple[Path, str]] = []

            def loader(artifact: Path, module_name: str):
                seen.append((artifact, module_name))
                return native_stub()

            runtime = init(_settings(root), host=HostPlatform("linux", "x64"), loader=loader)
            surface = runtime.surface
            exports = surface.exports()
            for name in CONSTANT_TABLES:
                self.assertIn(name, exports)
            self.assertIn("get_platform_info", exports)
            self.assertIn("health_check", exports)
            self.assertIn("RtAudio", exports)

            report = surface.health_check()
            self.assertEqual(report.status, "healthy")
            self.assertEqual(report.platform, "linux-x64")
            self.assertTrue(report.artifact_exists)

        self.assertEqual(seen, [(path, "audify")])
        self.assertEqual(runtime.platform_key, "linux-x64")
        self.assertEqual(runtime.artifact_path, path)
        info = surface.get_platform_info()
        self.assertEqual(info.to_dict(), {"platform": "linux-x64", "artifactPath": str(path)})
        self.assertIs(surface.OpusApplication, OpusApplication)

    def test_unsupported_platform_lists_all_supported_keys(self) -> None:
        def loader(artifact: Path, module_name: str):  # pragma: no cover
            raise AssertionError("loader must not run")

        with self.assertRaises(UnsupportedPlatform) as ctx:
            init(_settings(Path("/pkg").resolve()), host=HostPlatform("freebsd", "x64"), loader=loader)
        message = str(ctx.exception)
        self.assertIn("freebsd-x64", message)
        for key in PLATFORM_MAP:
            self.assertIn(key, message)

    def test_missing_artifact_is_fatal(self) -> None:
        with self.assertRaises(ArtifactNotFound):
            init(
                _settings(Path("/pkg").resolve()),
                host=HostPlatform("win32", "x64"),
                fs=FakeFileSystem(),
                loader=lambda *_: native_stub(),
            )

    def test_load_failure_propagates(self) -> None:
        root = Path("/pkg").resolve()
        path = root / "prebuilds" / "darwin-x64" / "build" / "Release" / "audify.node"

        def loader(artifact: Path, module_name: str):
            raise LoadFailure(artifact, "incompatible architecture")

        with self.assertRaises(LoadFailure) as ctx:
            init(
                _settings(root),
                host=HostPlatform("darwin", "x64"),
                fs=FakeFileSystem({path: True}),
                loader=loader,
            )
        self.assertIn("incompatible architecture", str(ctx.exception))

    def test_health_check_turns_unhealthy_after_artifact_removed(self) -> None:
        root = Path("/pkg").resolve()
        path = root / "prebuilds" / "linux-arm64" / "build" / "Release" / "audify.node"
        fs = FakeFileSystem({path: True})
        runtime = init(
            _settings(root),
            host=HostPlatform("linux", "arm64"),
            fs=fs,
            loader=lambda *_: native_stub(),
        )
        self.assertEqual(runtime.surface.health_check().status, "healthy")
        del fs.files[path]
        self.assertEqual(runtime.surface.health_check().status, "unhealthy")


class TestWrappedCapabilities(unittest.TestCase):
    def _surface(self, **overrides):
        root = Path("/pkg").resolve()
        path = root / "prebuilds" / "linux-x64" / "build" / "Release" / "audify.node"
        return init(
            _settings(root),
            host=HostPlatform("linux", "x64"),
            fs=FakeFileSystem({path: True}),
            loader=lambda *_: native_stub(**overrides),
        ).surface

    def test_success_passes_through(self) -> None:
        surface = self._surface()
        encoder = surface.OpusEncoder(48000, 1, OpusApplication.AUDIO)
        self.assertIsInstance(encoder, OpusEncoderStub)
        self.assertEqual(encoder.application, 2049)
        self.assertEqual(surface.RtAudio().getDevices()[0]["name"], "Dummy")

    def test_errors_are_logged_and_reraised_unchanged(self) -> None:
        surface = self._surface()
        with self.assertLogs("audify_plus.surface", level="ERROR") as logs:
            with self.assertRaises(ValueError) as ctx:
                surface.OpusEncoder(48000, 7, OpusApplication.VOIP)
        self.assertEqual(str(ctx.exception), "invalid channel count")
        self.assertIn("OpusEncoder failed", logs.output[0])

    def test_reraised_error_is_the_same_object(self) -> None:
        err = OSError(5, "device busy")

        class _BusyRtAudio:
            def __init__(self, *args) -> None:
                raise err

        surface = self._surface(RtAudio=_BusyRtAudio)
        with self.assertLogs("audify_plus.surface", level="ERROR"):
            with self.assertRaises(OSError) as ctx:
                surface.RtAudio()
        self.assertIs(ctx.exception, err)
        self.assertIsNone(ctx.exception.__cause__)

    def test_optional_capability_is_exposed_when_present(self) -> None:
        surface = self._surface(getAvailableApis=lambda: [2, 4])
        self.assertEqual(surface.getAvailableApis(), [2, 4])
        self.assertIn("getAvailableApis", surface.capabilities)
        self.assertNotIn("getAvailableApis", self._surface().capabilities)

    def test_unknown_native_members_are_not_reexported(self) -> None:
        surface = self._surface(secretHelper=lambda: None)
        self.assertFalse(hasattr(surface, "secretHelper"))


if __name__ == "__main__":
    unittest.main()
