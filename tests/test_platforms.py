import unittest
from pathlib import Path
from unittest.mock import patch

from audify_plus.errors import UnsupportedPlatform
from audify_plus.platforms import (
    PLATFORM_MAP,
    HostPlatform,
    map_to_artifact_path,
    normalize_arch,
    normalize_os,
    resolve_platform_key,
    supported_platform_keys,
)


class TestPlatformKey(unittest.TestCase):
    def test_key_joins_os_and_arch(self) -> None:
        self.assertEqual(HostPlatform("linux", "x64").key, "linux-x64")
        self.assertEqual(resolve_platform_key(HostPlatform("darwin", "arm64")), "darwin-arm64")

    def test_normalizes_python_machine_names(self) -> None:
        self.assertEqual(normalize_arch("x86_64"), "x64")
        self.assertEqual(normalize_arch("AMD64"), "x64")
        self.assertEqual(normalize_arch("aarch64"), "arm64")
        self.assertEqual(normalize_arch("armv7l"), "arm")
        self.assertEqual(normalize_arch("i686"), "ia32")
        self.assertEqual(normalize_arch("riscv64"), "riscv64")
        self.assertEqual(normalize_os("linux2"), "linux")
        self.assertEqual(normalize_os("freebsd14"), "freebsd")
        self.assertEqual(normalize_os("openbsd7"), "openbsd")
        self.assertEqual(normalize_os("sunos5"), "sunos")
        self.assertEqual(normalize_os("win32"), "win32")
        self.assertEqual(normalize_os("cygwin"), "win32")

    def test_detect_drops_bsd_version_suffix(self) -> None:
        with (
            patch("audify_plus.platforms.sys.platform", "freebsd14"),
            patch("audify_plus.platforms.platform.machine", return_value="amd64"),
        ):
            host = HostPlatform.detect()
        self.assertEqual(host.key, "freebsd-x64")

    def test_detect_reads_runtime(self) -> None:
        with (
            patch("audify_plus.platforms.sys.platform", "linux"),
            patch("audify_plus.platforms.platform.machine", return_value="x86_64"),
        ):
            host = HostPlatform.detect()
        self.assertEqual(host.key, "linux-x64")

    def test_detect_uses_ia32_for_32bit_windows_interpreter(self) -> None:
        with (
            patch("audify_plus.platforms.sys.platform", "win32"),
            patch("audify_plus.platforms.platform.machine", return_value="AMD64"),
            patch("audify_plus.platforms.struct.calcsize", return_value=4),
        ):
            host = HostPlatform.detect()
        self.assertEqual(host.key, "win32-ia32")
        self.assertTrue(host.is_windows)


class TestArtifactPath(unittest.TestCase):
    def test_every_supported_key_maps_to_release_path(self) -> None:
        root = Path("/opt/audify")
        for key, folder in PLATFORM_MAP.items():
            path = map_to_artifact_path(key, root)
            self.assertEqual(
                path, root / "prebuilds" / folder / "build" / "Release" / "audify.node"
            )
            self.assertEqual(path.parts[-4:], (folder, "build", "Release", "audify.node"))

    def test_table_matches_documented_targets(self) -> None:
        self.assertEqual(
            sorted(supported_platform_keys()),
            sorted(
                [
                    "win32-x64",
                    "win32-ia32",
                    "win32-arm64",
                    "darwin-x64",
                    "darwin-arm64",
                    "linux-x64",
                    "linux-arm64",
                    "linux-arm",
                ]
            ),
        )

    def test_custom_artifact_name(self) -> None:
        path = map_to_artifact_path("linux-arm", Path("/x"), "custom.so")
        self.assertEqual(path.name, "custom.so")

    def test_unmapped_key_raises_with_key_and_supported_list(self) -> None:
        with self.assertRaises(UnsupportedPlatform) as ctx:
            map_to_artifact_path("freebsd-x64", Path("/x"))
        err = ctx.exception
        self.assertEqual(err.key, "freebsd-x64")
        self.assertIn("freebsd-x64", str(err))
        for key in PLATFORM_MAP:
            self.assertIn(key, str(err))


if __name__ == "__main__":
    unittest.main()
