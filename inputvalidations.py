"""Line validation utilities for the knapsack packer.

This module turns one raw input line into a validated Pack, and validates
the optional settings payload before it reaches the pipeline.

Line grammar
------------
``<capacity> : (<index>,<weight>,€<cost>) (<index>,<weight>,€<cost>) ...``

Functions
---------
validate_line(line)
	Runs the structural split, capacity check, item extraction, item
	filtering and pack size check. Never raises: a failed line comes back
	with a rejection reason, a failed item is dropped and recorded.
validate_settings_payload(data)
	Checks keys, types and ranges of a settings mapping.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Set, Tuple

from domain_types import Item, Pack
from packer_errors import SettingsError
from packer_types import DroppedItem, ItemDropReason, LineRejectionReason, PackerSettings

__all__ = [
	"MAX_CAPACITY",
	"MAX_ITEMS",
	"MAX_ITEM_WEIGHT",
	"MAX_ITEM_COST",
	"LineValidation",
	"split_line",
	"parse_capacity",
	"extract_items",
	"check_item",
	"filter_items",
	"validate_line",
	"validate_settings_payload",
]

logger = logging.getLogger(__name__)

MAX_CAPACITY = 100
MAX_ITEMS = 15
MAX_ITEM_WEIGHT = Decimal(100)
MAX_ITEM_COST = Decimal(100)

# (index,weight,€cost); cost is always a whole number
ITEM_PATTERN = re.compile(r"\(\s*(\d+)\s*,\s*(\d+(?:\.\d+)?)\s*,\s*€\s*(\d+)\s*\)", re.ASCII)
_CAPACITY_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


@dataclass(frozen=True)
class LineValidation:
	"""Outcome of validate_line.

	Exactly one of ``pack`` / ``rejection`` is set. ``dropped`` lists the
	items discarded on the way, in input order, even for rejected lines.
	"""
	pack: Optional[Pack]
	rejection: Optional[LineRejectionReason]
	capacity: Optional[int] = None
	dropped: List[DroppedItem] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return self.pack is not None


def split_line(line: str) -> Optional[Tuple[str, str]]:
	"""Split a line on its first ':' into (capacity text, item text).

	Returns None when the line has no ':' and so does not yield two segments.
	"""
	head, sep, tail = line.partition(":")
	if not sep:
		return None
	return head, tail


def parse_capacity(text: str) -> Optional[int]:
	"""Parse and range check the capacity segment.

	Returns the capacity when it is an integer in (0, MAX_CAPACITY], else None.
	"""
	text = text.strip()
	if not _CAPACITY_PATTERN.fullmatch(text):
		return None
	capacity = int(text)
	if capacity <= 0 or capacity > MAX_CAPACITY:
		return None
	return capacity


def _unparsable(fragment: str) -> List[DroppedItem]:
	return [{"raw": raw, "index": None, "reason": "unparsable_item"} for raw in fragment.split()]


def extract_items(segment: str) -> Tuple[List[Tuple[str, Item]], List[DroppedItem]]:
	"""Locate every ``(index,weight,€cost)`` group in the item segment.

	Parameters
	----------
	segment : str
		Text after the first ':' of the line.

	Returns
	-------
	Tuple[List[Tuple[str, Item]], List[DroppedItem]]
		- candidates: (raw text, parsed Item) per matched group, in input order
		- unparsable: whitespace separated fragments that match no group
	"""
	candidates: List[Tuple[str, Item]] = []
	unparsable: List[DroppedItem] = []
	pos = 0
	for match in ITEM_PATTERN.finditer(segment):
		unparsable.extend(_unparsable(segment[pos:match.start()]))
		pos = match.end()
		item = Item(
			index=int(match.group(1)),
			weight=Decimal(match.group(2)),
			cost=Decimal(match.group(3)),
		)
		candidates.append((match.group(0), item))
	unparsable.extend(_unparsable(segment[pos:]))
	return candidates, unparsable


def check_item(item: Item) -> Optional[ItemDropReason]:
	"""Return the reason the item must be dropped, or None when it is valid on its own."""
	if item.index < 1:
		return "invalid_index"
	if item.weight <= 0 or item.weight > MAX_ITEM_WEIGHT:
		return "weight_out_of_range"
	if item.cost <= 0 or item.cost > MAX_ITEM_COST:
		return "cost_out_of_range"
	return None


def filter_items(candidates: List[Tuple[str, Item]]) -> Tuple[List[Item], List[DroppedItem]]:
	"""Apply item-level checks in input order.

	An index already accepted on this line makes the later candidate a
	duplicate; the earlier one is kept.
	"""
	accepted: List[Item] = []
	dropped: List[DroppedItem] = []
	seen: Set[int] = set()
	for raw, item in candidates:
		reason = check_item(item)
		if reason is None and item.index in seen:
			reason = "duplicate_index"
		if reason is not None:
			logger.debug("dropping item %s: %s", raw, reason)
			dropped.append({"raw": raw, "index": item.index, "reason": reason})
			continue
		seen.add(item.index)
		accepted.append(item)
	return accepted, dropped


def validate_line(line: str) -> LineValidation:
	"""Turn one raw line into a Pack or a rejection.

	Args:
		line: Raw input line, e.g. ``"81 : (1,53.38,€45) (2,88.62,€98)"``.

	Returns:
		LineValidation with the Pack on success, otherwise the rejection
		reason ("malformed_line", "invalid_capacity" or "invalid_item_count").
	"""
	parts = split_line(line)
	if parts is None:
		return LineValidation(pack=None, rejection="malformed_line")

	capacity = parse_capacity(parts[0])
	if capacity is None:
		return LineValidation(pack=None, rejection="invalid_capacity")

	candidates, unparsable = extract_items(parts[1])
	for entry in unparsable:
		logger.debug("dropping item %s: %s", entry["raw"], entry["reason"])
	items, dropped = filter_items(candidates)
	dropped = unparsable + dropped

	if not 1 <= len(items) <= MAX_ITEMS:
		return LineValidation(pack=None, rejection="invalid_item_count", capacity=capacity, dropped=dropped)

	return LineValidation(
		pack=Pack(capacity=capacity, items=tuple(items)),
		rejection=None,
		capacity=capacity,
		dropped=dropped,
	)


def validate_settings_payload(data: dict) -> PackerSettings:
	"""Validate a settings mapping and return it typed as PackerSettings.

	Args:
		data: Parsed JSON object; every key is optional.

	Returns:
		A new PackerSettings holding the normalized values.

	Raises:
		SettingsError: If the payload is not an object, has unknown keys, or
			a value has the wrong type or range.
	"""
	if not isinstance(data, dict):
		raise SettingsError("Settings must be a JSON object.")
	unknown = sorted(set(data) - set(PackerSettings.__annotations__))
	if unknown:
		raise SettingsError(f"Unknown settings keys: {unknown}")

	settings: PackerSettings = {}
	if "backend" in data:
		if data["backend"] not in ("dp", "cp-sat"):
			raise SettingsError(f"backend must be 'dp' or 'cp-sat' (got {data['backend']!r})")
		settings["backend"] = data["backend"]
	if "max_time_seconds" in data:
		value = data["max_time_seconds"]
		if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
			raise SettingsError(f"max_time_seconds must be a number > 0 (got {value!r})")
		settings["max_time_seconds"] = float(value)
	for key, minimum in (("max_dp_columns", 1), ("random_seed", 0), ("num_search_workers", 1)):
		if key not in data:
			continue
		value = data[key]
		if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
			raise SettingsError(f"{key} must be an integer >= {minimum} (got {value!r})")
		settings[key] = value  # type: ignore[literal-required]
	return settings
