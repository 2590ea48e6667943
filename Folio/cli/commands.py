"""Command handlers for the Folio admin console."""

from __future__ import annotations

import json
import mimetypes
import shlex
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

from ..content.merge import merge
from ..remote.client import UploadCategory
from ..remote.results import Fail
from ..sync.repository import PortfolioRepository

HELP_TEXT = """Commands:
  show                          → print the current portfolio and where it came from
  save <file.json>              → merge a JSON document over the defaults and save it
  upload <category> <path>      → upload an image (avatar, project, gallery) and print its URL
  reset                         → replace the local copy with the default portfolio
  status                        → show remote store configuration
  exit"""


def _read_json(path: str) -> Any:
	with open(path, "r", encoding="utf-8") as f:
		return json.load(f)


def handle_command(repo: PortfolioRepository, cmd: str, *, input_line: Callable[[], str]) -> Tuple[bool, Dict[str, Any]]:
	"""Handle a single console command.

	Returns (should_continue, info). ``info["ok"]`` is False when the
	command failed, so one-shot callers can pick an exit code.
	"""
	cmd = (cmd or "").strip()
	if not cmd:
		return True, {}

	try:
		parts = shlex.split(cmd)
	except ValueError as e:
		print(f"[FOLIO] Could not parse command: {e}")
		return True, {"ok": False}
	name = parts[0].lower()

	if name in {"exit", "quit"}:
		return False, {}

	if name == "help":
		print(HELP_TEXT)
		return True, {}

	if name == "status":
		remote = repo.remote
		print(f"[FOLIO] Remote configured: {remote.is_configured}")
		if remote.is_configured:
			print(f"[FOLIO] Table: {remote.config.table} (row {remote.config.document_key})")
			print(f"[FOLIO] Bucket: {remote.config.bucket}")
		return True, {"ok": True}

	if name == "show":
		loaded = repo.load_with_source()
		print(json.dumps(loaded.document.to_dict(), indent=2, ensure_ascii=False))
		print(f"[FOLIO] Source: {loaded.source.value}")
		if loaded.error:
			print(f"[FOLIO] Remote: {loaded.error.kind.value} - {loaded.error.message}")
		return True, {"ok": True, "source": loaded.source.value}

	if name == "save":
		if len(parts) < 2:
			print("Usage: save <file.json>")
			return True, {"ok": False}
		try:
			data = _read_json(parts[1])
		except (OSError, json.JSONDecodeError) as e:
			print(f"[FOLIO] ❌ Could not read {parts[1]}: {e}")
			return True, {"ok": False}
		if not isinstance(data, dict):
			print("[FOLIO] ❌ The file must contain a JSON object.")
			return True, {"ok": False}

		result = repo.save(merge(data))
		if result.success:
			print("[FOLIO] ✅ Saved.")
		else:
			print(f"[FOLIO] ⚠️ Saved locally only ({result.error.kind.value}): {result.error.message}")
		return True, {"ok": True, "saved_locally_only": result.saved_locally_only}

	if name == "upload":
		if len(parts) < 3:
			print("Usage: upload <avatar|project|gallery> <path>")
			return True, {"ok": False}
		try:
			category = UploadCategory(parts[1].lower())
		except ValueError:
			print(f"[FOLIO] ❌ Unknown category: {parts[1]}. Use avatar, project or gallery.")
			return True, {"ok": False}
		path = Path(parts[2])
		try:
			data = path.read_bytes()
		except OSError as e:
			print(f"[FOLIO] ❌ Could not read {path}: {e}")
			return True, {"ok": False}

		result = repo.upload_and_attach(data, path.name, category, mimetypes.guess_type(path.name)[0])
		if isinstance(result, Fail):
			print(f"[FOLIO] ❌ Upload failed ({result.kind.value}): {result.error.message}")
			return True, {"ok": False}
		print(f"[FOLIO] ✅ Uploaded: {result.value}")
		print("[FOLIO] Add this URL to your portfolio and save it to publish.")
		return True, {"ok": True, "url": result.value}

	if name == "reset":
		print("[FOLIO] Reset all data to defaults? [y/N]")
		try:
			answer = input_line().strip().lower()
		except (EOFError, KeyboardInterrupt):
			answer = ""
		if answer not in {"y", "yes"}:
			print("[FOLIO] Reset cancelled.")
			return True, {"ok": True}
		repo.reset()
		print("[FOLIO] ✅ Local portfolio reset to defaults. Run 'save' to publish.")
		return True, {"ok": True}

	print(f"[FOLIO] Unknown command: {name}. Type 'help' for a list.")
	return True, {"ok": False}
