"""
Parent/child display ordering for setup lists.

Hospitals hang under hospital systems and territories under rep teams.
The list views render one flat sequence:

    parent A
      child of A
      child of A
    parent B
    ── separator ──        (only if parents AND independent children exist)
    independent child
    independent child

A child whose parent is not in the given parent list (inactive or
missing) is shown as independent; no cascade is applied on delete, so
readers filter orphans here.
"""

SEPARATOR_ID = -1


def build_hierarchy(
    parents: list[dict],
    children: list[dict],
    *,
    parent_key: str,
    separator_label: str,
) -> list[dict]:
    """Flatten parents and children into display order.

    Args:
        parents: Serialized parent rows (must carry ``id``), already sorted.
        children: Serialized child rows, already sorted.
        parent_key: Child field holding the parent id (e.g. ``hospital_system_id``).
        separator_label: Name shown on the synthetic separator row.

    Returns:
        New list of dicts. Parent rows get ``is_child=False`` and a
        ``child_count``; children get ``is_child`` True when listed under a
        parent. The separator row is ``{"id": -1, "type": "separator", ...}``.
    """
    parent_ids = {p["id"] for p in parents}
    by_parent: dict[int, list[dict]] = {pid: [] for pid in parent_ids}
    independent: list[dict] = []

    for child in children:
        pid = child.get(parent_key)
        if pid is not None and pid in by_parent:
            by_parent[pid].append(child)
        else:
            independent.append(child)

    rows: list[dict] = []
    for parent in parents:
        kids = by_parent[parent["id"]]
        rows.append({**parent, "is_child": False, "child_count": len(kids)})
        rows.extend({**kid, "is_child": True} for kid in kids)

    if parents and independent:
        rows.append({
            "id": SEPARATOR_ID,
            "type": "separator",
            "name": separator_label,
            "is_child": False,
        })

    rows.extend({**child, "is_child": False} for child in independent)
    return rows


def group_children(parents: list[dict], children: list[dict], *, parent_key: str,
                   attr: str = "children") -> list[dict]:
    """Attach each parent's children under ``attr`` (nested view of the same data)."""
    return [
        {**p, attr: [c for c in children if c.get(parent_key) == p["id"]]}
        for p in parents
    ]
