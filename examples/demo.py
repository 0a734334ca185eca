"""jsondelta demo: point into, patch, diff and merge JSON documents."""

import jsondelta as jd

doc = {
    "title": "Fix the login bug",
    "tags": ["auth", "urgent"],
    "owner": {"name": "Sam", "team": "web"},
}

# ── 1. Pointer: read and edit one location ───────────────────────────

pointer = jd.JsonPointer("/tags/-")
print("1) pointer: append to /tags")
print(f"   {pointer.add(doc, 'backend')!r}")
print(f"   /owner/name = {jd.JsonPointer('/owner/name').get(doc)!r}")
print()


# ── 2. Patch: an ordered RFC 6902 batch ──────────────────────────────

patch = (
    jd.PatchBuilder()
    .test("/owner/team", "web")
    .replace("/title", "Fix the login bug (SSO)")
    .move("/assignee", "/owner/name")
    .remove("/tags/1")
    .build()
)
patched = jd.apply_patch(doc, patch)
print("2) apply_patch: test, replace, move, remove")
print(f"   {patched!r}")
print(f"   wire form: {patch.dumps()}")
print()


# ── 3. Failure: the whole batch aborts ───────────────────────────────

try:
    jd.apply_patch(doc, [{"op": "test", "path": "/owner/team", "value": "api"}])
except jd.PatchApplicationError as exc:
    print("3) failing test operation")
    print(f"   index={exc.index}  cause={type(exc.cause).__name__}")
print()


# ── 4. Diff: compute a patch between two documents ───────────────────

delta = jd.diff(doc, patched)
print("4) diff: positional, not minimal, but always correct")
for operation in delta:
    print(f"   {operation.model_dump(by_alias=True)}")
assert jd.apply_patch(doc, delta) == patched
print()


# ── 5. Merge patch: RFC 7396 ─────────────────────────────────────────

merged = jd.merge_patch(doc, {"owner": {"team": None, "email": "sam@example.com"}})
print("5) merge_patch: null removes, objects merge")
print(f"   {merged!r}")
