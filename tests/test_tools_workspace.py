from pathlib import Path
import pytest
from patchsmith.patch import PatchStats
from patchsmith.tools.errors import PatchInputError, PatchSecurityError, PatchsmithError
from patchsmith.tools.workspace import apply_patch_to_file

PATCH = """--- a/templates/deploy.yaml
+++ b/templates/deploy.yaml
@@ -1,2 +1,2 @@
-replicas: 1
+replicas: 3
 image: x
"""

def _setup(tmp_path: Path) -> Path:
    (tmp_path / "templates").mkdir()
    f = tmp_path / "templates" / "deploy.yaml"
    f.write_text("replicas: 1\nimage: x", encoding="utf-8")
    return f

def test_apply_writes_file_and_backup(tmp_path: Path):
    f = _setup(tmp_path)
    res = apply_patch_to_file(tmp_path, "templates/deploy.yaml", PATCH, allow_roots=["templates"])
    assert f.read_text(encoding="utf-8") == "replicas: 3\nimage: x"
    assert res.stats == PatchStats(1, 1)
    assert res.backup is not None and res.backup.exists()
    assert res.backup.read_text(encoding="utf-8") == "replicas: 1\nimage: x"
    assert ".patch_backups" in str(res.backup)

def test_refuses_path_outside_allow_roots(tmp_path: Path):
    _setup(tmp_path)
    with pytest.raises(PatchSecurityError):
        apply_patch_to_file(tmp_path, "../evil.txt", PATCH, allow_roots=["templates"], dry_run=True)
    with pytest.raises(PatchsmithError):
        apply_patch_to_file(tmp_path, "values.yaml", PATCH, allow_roots=["templates"], dry_run=True)

def test_missing_file_is_created(tmp_path: Path):
    (tmp_path / "templates").mkdir()
    patch = "--- /dev/null\n+++ b/templates/new.yaml\n@@ -0,0 +1,2 @@\n+a: 1\n+b: 2\n"
    res = apply_patch_to_file(tmp_path, "templates/new.yaml", patch, allow_roots=["templates"])
    assert (tmp_path / "templates" / "new.yaml").read_text(encoding="utf-8") == "a: 1\nb: 2"
    assert res.backup is None
    assert res.stats == PatchStats(2, 0)

def test_dry_run_leaves_file_untouched(tmp_path: Path):
    f = _setup(tmp_path)
    res = apply_patch_to_file(tmp_path, "templates/deploy.yaml", PATCH, allow_roots=["templates"], dry_run=True)
    assert res.content == "replicas: 3\nimage: x"
    assert f.read_text(encoding="utf-8") == "replicas: 1\nimage: x"
    assert res.backup is None

def test_size_limit(tmp_path: Path):
    _setup(tmp_path)
    with pytest.raises(PatchSecurityError):
        apply_patch_to_file(tmp_path, "templates/deploy.yaml", PATCH, allow_roots=["templates"], max_total_bytes=5)

MULTI_PATCH = """--- a/templates/a.yaml
+++ b/templates/a.yaml
@@ -1,1 +1,1 @@
-a1
+A1
--- a/templates/b.yaml
+++ b/templates/b.yaml
@@ -2,1 +2,1 @@
-b2
+B2
"""

def test_multi_file_patch_only_applies_own_section(tmp_path: Path):
    (tmp_path / "templates").mkdir()
    f = tmp_path / "templates" / "a.yaml"
    f.write_text("a1\na2", encoding="utf-8")
    res = apply_patch_to_file(tmp_path, "templates/a.yaml", MULTI_PATCH, allow_roots=["templates"])
    assert f.read_text(encoding="utf-8") == "A1\na2"
    assert res.stats == PatchStats(1, 1)

def test_multi_file_patch_without_section_for_target(tmp_path: Path):
    (tmp_path / "templates").mkdir()
    (tmp_path / "templates" / "c.yaml").write_text("c1\nc2", encoding="utf-8")
    res = apply_patch_to_file(tmp_path, "templates/c.yaml", MULTI_PATCH, allow_roots=["templates"], dry_run=True)
    assert res.content == "c1\nc2"
    assert res.stats == PatchStats(0, 0)

def test_non_utf8_file_is_refused_and_kept(tmp_path: Path):
    (tmp_path / "templates").mkdir()
    f = tmp_path / "templates" / "deploy.yaml"
    raw = b"name: caf\xe9\nreplicas: 1"
    f.write_bytes(raw)
    with pytest.raises(PatchInputError):
        apply_patch_to_file(tmp_path, "templates/deploy.yaml", PATCH, allow_roots=["templates"])
    assert f.read_bytes() == raw
    assert not (tmp_path / ".patch_backups").exists()

def test_successive_applies_keep_every_backup(tmp_path: Path):
    _setup(tmp_path)
    first = apply_patch_to_file(tmp_path, "templates/deploy.yaml", PATCH, allow_roots=["templates"])
    second = apply_patch_to_file(tmp_path, "templates/deploy.yaml", PATCH, allow_roots=["templates"])
    assert first.backup != second.backup
    assert first.backup.exists() and second.backup.exists()
    assert first.backup.read_text(encoding="utf-8") == "replicas: 1\nimage: x"
    assert second.backup.read_text(encoding="utf-8") == "replicas: 3\nimage: x"
