from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence


def dump_list(values: Sequence[Any]) -> str:
    return json.dumps(list(values), ensure_ascii=False)


def load_json_list(raw: str) -> List[Any]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return []
    if isinstance(data, list):
        return data
    return []


def load_string_list(raw: str) -> List[str]:
    values = load_json_list(raw)
    return [str(value) for value in values]


def load_dict_list(raw: str) -> List[Dict[str, Any]]:
    return [value for value in load_json_list(raw) if isinstance(value, dict)]
