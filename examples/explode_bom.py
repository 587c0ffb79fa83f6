#!/usr/bin/env python3
"""Example: explode a multi-level BOM and export the full DFS order.

Loads a BOM spreadsheet (and optionally a routing sheet), prints the
level-1 view with its expand markers, then writes every exploded row to the
output file with the helper columns removed.
"""

import logging

from bomtree import BomWorkspace


def explode_bom(bom_file: str, output_file: str, routing_file: str = None):
    """Explode a BOM file and export the canonical order.

    Args:
        bom_file: Path to the BOM file (CSV or Excel)
        output_file: Path to the exported file (.xlsx, .csv or .json)
        routing_file: Optional path to a routing file
    """
    workspace = BomWorkspace()
    session = workspace.load(bom_file, routing_file)

    print(f"✓ Loaded {len(session.records)} rows ({session.dropped_expired} expired rows dropped)")
    print(f"✓ Exploded into {len(session.explosion)} rows from root(s): {', '.join(session.explosion.roots)}")
    if session.feature_code:
        print(f"  Feature code: {session.feature_code}")

    print("\nLevel 1 view:")
    for node in workspace.view:
        marker = node.indicator or " "
        print(f"  [{marker}] {node.level_label:>3}  {node.component_id}")

    path = workspace.export(output_file)
    print(f"\n✓ Output saved to: {path}")
    return session


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 3:
        print("Usage: python explode_bom.py <bom_file> <output_file> [routing_file]")
        print("\nExample:")
        print("  python explode_bom.py Bom.xlsx Bom_Dfs_Result.xlsx Routing.xlsx")
        sys.exit(1)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    explode_bom(sys.argv[1], sys.argv[2], sys.argv[3] if len(sys.argv) > 3 else None)
