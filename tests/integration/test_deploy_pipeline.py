"""End-to-end deploys with real sh, tar and rsync.

Skipped when tar or rsync is not installed.
"""

import hashlib
import io
import shutil
import tarfile

import pytest

from stretcher.commands.deploy import build_deployer
from stretcher.deploy import (
    ChecksumMismatchError,
    DeployStage,
    ExtractionError,
    parse_manifest,
)

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not (shutil.which("tar") and shutil.which("rsync")),
        reason="tar and rsync required",
    ),
]


def make_tarball(path, files):
    with tarfile.open(path, "w") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return hashlib.md5(path.read_bytes()).hexdigest()


def snapshot(root):
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def workspace(tmp_path):
    staging = tmp_path / "staging"
    staging.mkdir()
    dest = tmp_path / "srv" / "app"
    dest.mkdir(parents=True)
    return tmp_path, staging, dest


def manifest_yaml(src, dest, checksum="", pre=(), post=()):
    lines = [f"src: {src}", f"dest: {dest}"]
    if checksum:
        lines.append(f"checksum: {checksum}")
    lines.append("commands:")
    lines.append(f"  pre: {list(pre)!r}")
    lines.append(f"  post: {list(post)!r}")
    return "\n".join(lines) + "\n"


class TestDeployPipeline:

    def test_mirrors_archive_onto_destination(self, workspace):
        tmp_path, staging, dest = workspace
        archive = tmp_path / "a.tar"
        md5 = make_tarball(archive, {"index.html": b"<h1>v2</h1>", "lib/app.py": b"print('v2')\n"})
        (dest / "stale.txt").write_text("left over from v1")
        post_marker = tmp_path / "post-ran"

        manifest = parse_manifest(manifest_yaml(
            archive.as_uri(), dest, md5, post=[f"touch {post_marker}"]
        ))
        result = build_deployer(manifest, temp_dir=str(staging)).deploy()

        assert result.stage is DeployStage.DONE
        assert snapshot(dest) == {"index.html": b"<h1>v2</h1>", "lib/app.py": b"print('v2')\n"}
        assert post_marker.exists()
        assert list(staging.iterdir()) == []

    def test_repeated_deploy_is_idempotent(self, workspace):
        tmp_path, staging, dest = workspace
        archive = tmp_path / "a.tar"
        md5 = make_tarball(archive, {"a.txt": b"A", "sub/b.txt": b"B"})
        manifest = parse_manifest(manifest_yaml(str(archive), dest, md5))

        build_deployer(manifest, temp_dir=str(staging)).deploy()
        first = snapshot(dest)
        build_deployer(manifest, temp_dir=str(staging)).deploy()

        assert snapshot(dest) == first

    def test_wrong_checksum_leaves_destination_untouched(self, workspace):
        tmp_path, staging, dest = workspace
        archive = tmp_path / "a.tar"
        md5 = make_tarball(archive, {"new.txt": b"new"})
        (dest / "current.txt").write_text("current")
        wrong = md5[:-1] + ("0" if md5[-1] != "0" else "1")
        sentinel = tmp_path / "pre-ran"

        manifest = parse_manifest(manifest_yaml(
            str(archive), dest, wrong, pre=[f"touch {sentinel}"]
        ))
        with pytest.raises(ChecksumMismatchError):
            build_deployer(manifest, temp_dir=str(staging)).deploy()

        assert snapshot(dest) == {"current.txt": b"current"}
        assert not sentinel.exists()
        assert list(staging.iterdir()) == []

    def test_corrupt_archive_fails_extraction(self, workspace):
        tmp_path, staging, dest = workspace
        archive = tmp_path / "a.tar"
        archive.write_bytes(b"this is not a tar archive at all" * 20)
        manifest = parse_manifest(manifest_yaml(str(archive), dest))

        with pytest.raises(ExtractionError) as excinfo:
            build_deployer(manifest, temp_dir=str(staging)).deploy()

        assert excinfo.value.output
        assert list(staging.iterdir()) == []
