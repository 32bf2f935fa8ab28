"""
Unit tests for cache key derivation.
"""

import hashlib
import random
from pathlib import Path

from mavenkit.caching.keys import (
    CacheContext,
    CacheKey,
    CacheKeyDeriver,
    ManifestFile,
)

CONTEXT = CacheContext(os="linux", runtime_requirement="17", build_tool_requirement="3.9.5")


def manifest(name: str, content: bytes) -> ManifestFile:
    return ManifestFile(absolute_path=Path("/project") / name, raw_bytes=content)


class TestDeriveKey:
    """Tests for CacheKeyDeriver.derive_key."""

    def test_single_manifest(self):
        key = CacheKeyDeriver().derive_key([manifest("pom.xml", b"A")], CONTEXT)

        expected = hashlib.sha256(b"linux" + b"17" + b"3.9.5" + b"A").hexdigest()
        assert key.digest_hex == expected
        assert key.value == "maven-deps-" + expected
        assert str(key) == key.value

    def test_manifests_concatenated_in_order(self):
        manifests = [manifest("pom.xml", b"ROOT"), manifest("core/pom.xml", b"CORE")]

        key = CacheKeyDeriver().derive_key(manifests, CONTEXT)

        expected = hashlib.sha256(b"linux173.9.5ROOTCORE").hexdigest()
        assert key.digest_hex == expected

    def test_order_matters(self):
        a, b = manifest("pom.xml", b"ROOT"), manifest("core/pom.xml", b"CORE")
        deriver = CacheKeyDeriver()

        assert deriver.derive_key([a, b], CONTEXT) != deriver.derive_key([b, a], CONTEXT)

    def test_deterministic(self):
        manifests = [manifest("pom.xml", b"<project/>")]
        deriver = CacheKeyDeriver()

        assert deriver.derive_key(manifests, CONTEXT) == deriver.derive_key(
            manifests, CONTEXT
        )

    def test_single_byte_change(self):
        deriver = CacheKeyDeriver()
        before = deriver.derive_key([manifest("pom.xml", b"<project/>")], CONTEXT)
        after = deriver.derive_key([manifest("pom.xml", b"<project/ >")], CONTEXT)

        assert before != after

    def test_random_byte_flip_in_any_manifest(self):
        """Changing one byte of any manifest always changes the key."""
        rng = random.Random(20240601)
        deriver = CacheKeyDeriver()
        manifests = [
            manifest(f"module-{i}/pom.xml", bytes(rng.randrange(256) for _ in range(64)))
            for i in range(5)
        ]
        original = deriver.derive_key(manifests, CONTEXT)

        for _ in range(500):
            index = rng.randrange(len(manifests))
            content = bytearray(manifests[index].raw_bytes)
            position = rng.randrange(len(content))
            content[position] ^= rng.randrange(1, 256)

            mutated = list(manifests)
            mutated[index] = manifest(f"module-{index}/pom.xml", bytes(content))

            assert deriver.derive_key(mutated, CONTEXT) != original

    def test_requirement_change(self):
        deriver = CacheKeyDeriver()
        manifests = [manifest("pom.xml", b"A")]
        other = CacheContext("linux", "21", "3.9.5")

        assert deriver.derive_key(manifests, CONTEXT) != deriver.derive_key(
            manifests, other
        )

    def test_no_manifests(self):
        key = CacheKeyDeriver().derive_key([], CONTEXT)
        assert key.digest_hex == hashlib.sha256(b"linux173.9.5").hexdigest()


class TestRestoreChain:
    """Tests for CacheKeyDeriver.derive_restore_chain."""

    def test_chain(self):
        assert CacheKeyDeriver().derive_restore_chain(CONTEXT) == [
            "maven-deps-linux-17-3.9.5",
            "maven-deps-linux-17",
            "maven-deps-linux",
            "maven-deps",
        ]

    def test_each_entry_prefixes_the_previous(self):
        chain = CacheKeyDeriver().derive_restore_chain(CONTEXT)
        for specific, broader in zip(chain, chain[1:]):
            assert specific.startswith(broader)
            assert len(specific) > len(broader)


class TestDeriveForDirectory:
    """Tests for scan + read + derive."""

    def test_multi_module_project(self, maven_project: Path):
        key = CacheKeyDeriver().derive_for_directory(maven_project, CONTEXT)

        expected = hashlib.sha256(
            b"linux173.9.5"
            b"<project>root</project><project>core</project><project>web</project>"
        ).hexdigest()
        assert key == CacheKey(digest_hex=expected)

    def test_repeated_scans_agree(self, maven_project: Path):
        deriver = CacheKeyDeriver()
        assert deriver.derive_for_directory(
            maven_project, CONTEXT
        ) == deriver.derive_for_directory(maven_project, CONTEXT)

    def test_manifest_content_is_reread(self, maven_project: Path):
        deriver = CacheKeyDeriver()
        before = deriver.derive_for_directory(maven_project, CONTEXT)

        (maven_project / "web" / "pom.xml").write_bytes(b"<project>web2</project>")

        assert deriver.derive_for_directory(maven_project, CONTEXT) != before

    def test_unreadable_manifest_skipped(self, tmp_path: Path):
        readable = tmp_path / "pom.xml"
        readable.write_bytes(b"A")

        manifests = CacheKeyDeriver().read_manifests([readable, tmp_path / "gone.xml"])

        assert [m.raw_bytes for m in manifests] == [b"A"]
