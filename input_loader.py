from __future__ import annotations

import json
from pathlib import Path
from typing import List

from inputvalidations import validate_settings_payload
from packer_errors import SettingsError, SourceUnavailable
from packer_types import PackerSettings


def load_lines(input_file: str | Path) -> List[str]:
	"""Read the whole input file and return its non-blank lines, in order.

	Parameters
	----------
	input_file : str | Path
		Path to a UTF-8 text file with one pack per line, e.g.
		``81 : (1,53.38,€45) (2,88.62,€98)``.

	Returns
	-------
	List[str]
		Lines with trailing newlines removed; lines that are empty or only
		whitespace are skipped.

	Raises
	------
	SourceUnavailable
		If the file does not exist, cannot be read, or is not valid UTF-8.
	"""
	path = Path(input_file)
	try:
		text = path.read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError) as exc:
		raise SourceUnavailable(f"Error reading file: {path}: {exc}") from exc
	return [line for line in text.splitlines() if line.strip()]


def load_settings(settings_file: str | Path) -> PackerSettings:
	"""Load packer settings from a JSON object.

	Example JSON:
	{
	  "backend": "cp-sat",
	  "max_time_seconds": 5,
	  "num_search_workers": 1
	}

	Raises
	------
	SettingsError
		If the file is missing, is not valid JSON, or fails validation.
	"""
	path = Path(settings_file)
	if not path.exists():
		raise SettingsError(f"settings file not found: {path}")

	with path.open("r", encoding="utf-8") as f:
		try:
			data = json.load(f)
		except json.JSONDecodeError as exc:
			raise SettingsError(f"Invalid JSON in settings file: {path}") from exc

	return validate_settings_payload(data)
