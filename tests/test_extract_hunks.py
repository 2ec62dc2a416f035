from patchsmith.patch import ADDITION, CONTEXT, DELETION, extract_hunks, parse_hunk_header

def _kinds(h):
    return [l.kind for l in h.lines]

def _texts(h):
    return [l.text for l in h.lines]

def test_canonical_header():
    patch = "--- a/f\n+++ b/f\n@@ -3,2 +3,3 @@\n a\n+b\n c"
    hunks = extract_hunks(patch, [])
    assert len(hunks) == 1
    h = hunks[0]
    assert (h.original_start, h.original_count, h.modified_start, h.modified_count) == (3, 2, 3, 3)
    assert _kinds(h) == [CONTEXT, ADDITION, CONTEXT]
    assert _texts(h) == ["a", "b", "c"]

def test_header_counts_may_be_omitted():
    assert parse_hunk_header("@@ -2 +2 @@") == (2, 1, 2, 1)
    assert parse_hunk_header("@@ -7,3 +9,4 @@ def main():") == (7, 3, 9, 4)
    assert parse_hunk_header("@@ @@") is None

def test_preamble_is_skipped():
    patch = "diff --git a/f b/f\nindex 123..456\n--- a/f\n+++ b/f\n@@ -1,1 +1,1 @@\n-a\n+b"
    h = extract_hunks(patch, ["a"])[0]
    assert _kinds(h) == [DELETION, ADDITION]

def test_body_may_start_with_hunk_header():
    hunks = extract_hunks("@@ -1,1 +1,2 @@\n a\n+b", ["a"])
    assert len(hunks) == 1
    assert _texts(hunks[0]) == ["a", "b"]

def test_hunks_are_sorted_by_original_start():
    patch = "@@ -4,2 +4,3 @@\n line4\n+x\n line5\n@@ -1,2 +1,3 @@\n line1\n+y\n line2"
    hunks = extract_hunks(patch, [])
    assert [h.original_start for h in hunks] == [1, 4]

def test_malformed_header_recovers_position_from_context():
    original = ["def a():", "    return 1", "", "def b():", "    return 2"]
    patch = "@@ @@\n def b():\n+    # doc\n     return 2"
    h = extract_hunks(patch, original)[0]
    assert h.original_start == 4
    assert h.modified_start == 4
    assert (h.original_count, h.modified_count) == (1, 1)

def test_malformed_header_without_context_defaults_to_one():
    h = extract_hunks("@@\n+new", ["a", "b"])[0]
    assert (h.original_start, h.original_count, h.modified_start, h.modified_count) == (1, 1, 1, 1)
    assert _kinds(h) == [ADDITION]

def test_blank_line_is_empty_context():
    h = extract_hunks("@@ -1,3 +1,4 @@\n a\n\n+c\n d", [])[0]
    assert _kinds(h) == [CONTEXT, CONTEXT, ADDITION, CONTEXT]
    assert _texts(h)[1] == ""

def test_no_newline_marker_is_dropped():
    h = extract_hunks("@@ -1,1 +1,1 @@\n-a\n+b\n\\ No newline at end of file", ["a"])[0]
    assert _kinds(h) == [DELETION, ADDITION]

def test_unmarked_lines_in_standard_hunk_are_ignored():
    h = extract_hunks("@@ -1,2 +1,2 @@\n a\n-b\n+c\ngarbage", ["a", "b"])[0]
    assert _texts(h) == ["a", "b", "c"]

def test_simple_replacement_becomes_delete_then_add():
    original = ["# before", "replicaCount: 1", "# after"]
    patch = "@@ -1,3 +1,3 @@\n# before\nreplicaCount: 3\n# after"
    h = extract_hunks(patch, original)[0]
    assert _kinds(h) == [DELETION] * 3 + [ADDITION] * 3
    assert _texts(h)[:3] == original
    assert _texts(h)[3:] == ["# before", "replicaCount: 3", "# after"]

def test_simple_replacement_keeps_indentation():
    patch = "@@ -1,2 +1,2 @@\nspec:\n  replicas: 2"
    h = extract_hunks(patch, ["spec:", "  replicas: 1"])[0]
    assert _texts(h)[2:] == ["spec:", "  replicas: 2"]

def test_new_file_without_markers():
    h = extract_hunks("@@ -0,0 +1,3 @@\nitems:\n- one\n+two", [])[0]
    assert _kinds(h) == [ADDITION] * 3
    assert _texts(h) == ["items:", "- one", "two"]

def test_simple_replacement_deletions_bounded_by_content():
    hunks = extract_hunks("@@ -1,3000000 +1,1 @@\nx", ["a"])
    assert len(hunks) == 1
    assert _kinds(hunks[0]) == [DELETION, ADDITION]
    assert _texts(hunks[0]) == ["a", "x"]

def test_header_with_extra_spaces_is_parsed():
    assert parse_hunk_header("@@ -1,3  +1,3 @@") == (1, 3, 1, 3)
    assert parse_hunk_header("@@-4,2 +5,3@@") == (4, 2, 5, 3)
