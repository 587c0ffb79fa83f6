"""BOM schema definitions: well-known column keys, default headers and aliases."""

from dataclasses import dataclass, fields
from typing import Dict, List

# Well-known keys of the BOM table
PARENT = "parent"
CHILD = "child"
SEQUENCE = "sequence"
LEVEL = "level"
FULL_PATH = "full_path"
EXPIRY = "expiry"
FEATURE_CODE = "feature_code"
ROOT_ID = "root_id"
LEAF_FLAG = "leaf_flag"
USAGE_FLAG = "usage_flag"

# Well-known keys of the routing table
COMPONENT = "component"
OPERATION_SEQUENCE = "operation_sequence"

REQUIRED_BOM_KEYS = [PARENT, CHILD, SEQUENCE, LEVEL]
REQUIRED_ROUTING_KEYS = [COMPONENT, OPERATION_SEQUENCE]

# Helper columns never written by the exporter
EXPORT_EXCLUDED_KEYS = [
    PARENT,
    SEQUENCE,
    FULL_PATH,
    FEATURE_CODE,
    ROOT_ID,
    LEAF_FLAG,
    USAGE_FLAG,
]

# Appended to the owner's level label on routing rows ("2" -> "2R")
ROUTING_LEVEL_SUFFIX = "R"

# Level shown by the initial, fully collapsed view
DEFAULT_TARGET_LEVEL = 1

# Mapping of common column name variations to well-known keys.
# Helper and expiry keys only take qualified names: a plain "Usage" or
# "End Date" column is ordinary data and must pass through untouched.
COLUMN_MAPPINGS = {
    PARENT: [
        "parent", "parent id", "parent part", "parent part number",
        "parent item", "parent no", "assembly", "父件", "主件", "母件料號"
    ],
    CHILD: [
        "child", "child id", "child part", "child part number",
        "component part", "child item", "子件", "元件", "子件料號"
    ],
    SEQUENCE: [
        "sequence", "seq", "seq no", "find number", "find no", "item seq",
        "組合項次", "项次", "項次"
    ],
    LEVEL: [
        "level", "lvl", "bom level", "depth", "階層", "阶层", "層次"
    ],
    FULL_PATH: [
        "full path", "fullpath", "bom path"
    ],
    EXPIRY: [
        "expiry date", "失效日期", "失效日"
    ],
    FEATURE_CODE: [
        "feature code", "characteristic code", "特性編碼", "特性码"
    ],
    ROOT_ID: [
        "root id", "root part id", "成品料號"
    ],
    LEAF_FLAG: [
        "leaf flag", "is leaf", "末階"
    ],
    USAGE_FLAG: [
        "usage flag", "使用否"
    ],
    COMPONENT: [
        "component", "component id", "part number", "item", "child",
        "料號", "品號"
    ],
    OPERATION_SEQUENCE: [
        "operation sequence", "op seq", "operation seq", "operation no",
        "op no", "製程序", "工序", "加工順序"
    ],
}


@dataclass(frozen=True)
class BomColumns:
    """Header names of the well-known BOM columns.

    A configured name that is present in the table wins; otherwise the
    header is resolved through COLUMN_MAPPINGS.
    """
    parent: str = "PARENT"
    child: str = "CHILD"
    sequence: str = "組合項次"
    level: str = "階層"
    full_path: str = "FULL_PATH"
    expiry: str = "失效日期"
    feature_code: str = "特性編碼"
    root_id: str = "ROOT_ID"
    leaf_flag: str = "IS_LEAF"
    usage_flag: str = "USAGE_FLAG"

    def as_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def required_keys(self) -> List[str]:
        return list(REQUIRED_BOM_KEYS)


@dataclass(frozen=True)
class RoutingColumns:
    """Header names of the well-known routing columns."""
    component: str = "COMPONENT"
    operation_sequence: str = "OP_SEQ"
    expiry: str = "失效日期"

    def as_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def required_keys(self) -> List[str]:
        return list(REQUIRED_ROUTING_KEYS)
