from __future__ import annotations

import json
import os
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

REDACTED = '***redacted***'


def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')


def _safe_str(x: Any) -> str:
    try:
        return str(x)
    except Exception:
        return '<unprintable>'


class LoggingHandler:
    """
    Centralized, configurable logging sink with per-aspect gating.

    - Format: JSONL or plain text
    - File policy: per-run timestamped file in [LOG].dir or explicit [LOG].file
    - Console mirror: optional via OutputHandler (when provided)
    - Redaction & truncation: applied to data payloads; answers typed with
      echo disabled are never written
    """

    # Aspect level mapping
    _LEVELS = {  # numeric for comparisons
        'off': 0,
        'minimal': 1,
        'basic': 1,
        'detail': 2,
        'trace': 3,
    }

    _DEFAULTS = {  # default levels when aspect unset and no global verbosity
        'settings': 'basic',
        'prompt': 'basic',
        'menu': 'basic',
        'errors': 'basic',
    }

    def __init__(self, config, output_handler=None) -> None:
        self._config = config
        self._output = output_handler
        self._active: bool = bool(self._get('active', False))
        self._format: str = (self._get('format', 'json') or 'json').strip().lower()
        if self._format not in ('json', 'text'):
            self._format = 'json'
        self._mirror: bool = bool(self._get('mirror_to_console', False))
        self._redact: bool = bool(self._get('redact', True))
        self._truncate: int = int(self._get('truncate_chars', 2000) or 2000)
        verbosity = self._get('verbosity', None)
        if verbosity is False:
            verbosity = 'off'
        self._verbosity_base: Optional[str] = (verbosity or None)
        if isinstance(self._verbosity_base, str):
            self._verbosity_base = self._verbosity_base.strip().lower()
        # Pre-parse per-aspect levels
        self._aspects: Dict[str, int] = {}
        for asp, default in self._DEFAULTS.items():
            raw = self._get(f'log_{asp}', None)
            if raw is False:
                raw = 'off'
            elif raw is True:
                raw = default
            if isinstance(raw, str) and raw.strip():
                level_name = raw.strip().lower()
            elif isinstance(self._verbosity_base, str):
                level_name = self._verbosity_base
            else:
                level_name = default
            self._aspects[asp] = self._LEVELS.get(level_name, self._LEVELS['off'])

        self._run_id = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
        self._log_path = None
        if self._active:
            self._log_path = self._open_logfile()
        self._write = self._writer_json if self._format == 'json' else self._writer_text

    # --- Public helpers -------------------------------------------------
    def active(self) -> bool:
        return bool(self._active and self._log_path)

    def log(self, event: str, *, component: str, aspect: str, severity: str = 'info', data: Optional[dict] = None) -> None:
        if not self._should_log(aspect, 'basic'):
            return
        self._write(self._prepare_payload(event, component, aspect, severity, data or {}))

    def settings(self, effective: dict) -> None:
        if not self._should_log('settings', 'basic'): return
        self._write(self._prepare_payload('settings', 'core.session', 'settings', 'info', effective))

    # Prompt lifecycle ---------------------------------------------------
    def ask_begin(self, prompt: str, answer_type: str) -> None:
        if not self._should_log('prompt', 'basic'): return
        data = {'prompt': prompt, 'answer_type': answer_type}
        self._write(self._prepare_payload('ask_begin', 'core.pipeline', 'prompt', 'info', data))

    def ask_retry(self, kind: Optional[str], attempt: int, raw: Any = None, secret: bool = False) -> None:
        if not self._should_log('prompt', 'basic'): return
        data: Dict[str, Any] = {'kind': kind or 'declined', 'attempt': attempt}
        if self._should_log('prompt', 'detail'):
            data['raw'] = REDACTED if secret else raw
        self._write(self._prepare_payload('ask_retry', 'core.pipeline', 'prompt', 'info', data))

    def ask_done(self, attempts: int, answer: Any = None, secret: bool = False) -> None:
        if not self._should_log('prompt', 'basic'): return
        data: Dict[str, Any] = {'attempts': attempts}
        if self._should_log('prompt', 'detail'):
            data['answer'] = REDACTED if secret else _safe_str(answer)
        self._write(self._prepare_payload('ask_done', 'core.pipeline', 'prompt', 'info', data))

    def menu_select(self, name: str, shell: bool, details: Optional[str] = None) -> None:
        if not self._should_log('menu', 'basic'): return
        data: Dict[str, Any] = {'name': name, 'shell': shell}
        if details is not None and self._should_log('menu', 'detail'):
            data['details'] = details
        self._write(self._prepare_payload('menu_select', 'core.session', 'menu', 'info', data))

    def error(self, where: str, exc: BaseException, *, stack: Optional[str] = None):
        if not self._should_log('errors', 'basic'): return
        s = stack or ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self._write(self._prepare_payload('error', where, 'errors', 'error', {'message': _safe_str(exc), 'stack': s}))

    # --- Internals ------------------------------------------------------
    def _get(self, key: str, fallback: Any = None) -> Any:
        try:
            return self._config.get_option('LOG', key, fallback)
        except Exception:
            return fallback

    def _open_logfile(self) -> Optional[str]:
        try:
            # Application root: the directory containing main.py (one level above utils/)
            app_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

            explicit = (self._get('file', '') or '').strip()
            per_run = bool(self._get('per_run', True))
            raw_dir = self._get('dir', 'logs') or 'logs'

            # Resolve directory: absolute stays; relative -> app_root/<dir>
            raw_dir = os.path.expanduser(str(raw_dir))
            log_dir = raw_dir if os.path.isabs(raw_dir) else os.path.join(app_root, raw_dir)
            os.makedirs(log_dir, exist_ok=True)

            if explicit:
                explicit = os.path.expanduser(explicit)
                path = explicit if os.path.isabs(explicit) else os.path.join(log_dir, explicit)
            else:
                filename = f'promptline-{self._run_id}.log' if per_run else 'promptline.log'
                path = os.path.join(log_dir, filename)

            os.makedirs(os.path.dirname(path) or log_dir, exist_ok=True)
            with open(path, 'a', encoding='utf-8'):
                pass
            return path
        except OSError:
            return None

    def _level_for(self, aspect: str) -> int:
        return self._aspects.get(aspect, 0)

    def _should_log(self, aspect: str, min_level_name: str) -> bool:
        if not self._active or not self._log_path:
            return False
        lvl = self._level_for(aspect)
        required = self._LEVELS.get(min_level_name, 1)
        return lvl >= required

    def _redact_and_truncate(self, data: Any) -> Any:
        raw = self._get('redact_keys', None)
        if isinstance(raw, str) and raw.strip():
            keys = [k.strip().lower() for k in raw.split(',') if k.strip()]
        else:
            keys = ['password', 'secret', 'token', 'pin']

        def _walk(obj: Any) -> Any:
            if isinstance(obj, str):
                if self._truncate and len(obj) > self._truncate:
                    return obj[: self._truncate] + '…'
                return obj
            if isinstance(obj, dict):
                out = {}
                for k, v in obj.items():
                    kk = _safe_str(k)
                    if self._redact and kk.lower() in keys:
                        out[kk] = REDACTED
                    else:
                        out[kk] = _walk(v)
                return out
            if isinstance(obj, (list, tuple)):
                return [_walk(x) for x in obj]
            return obj

        return _walk(data)

    def _prepare_payload(self, event: str, component: str, aspect: str, severity: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'ts': _now_iso(),
            'run_id': self._run_id,
            'event': event,
            'component': component,
            'aspect': aspect,
            'severity': severity,
            'data': self._redact_and_truncate(data or {}),
        }

    def _append(self, line: str) -> None:
        try:
            with open(self._log_path, 'a', encoding='utf-8') as f:
                f.write(line + '\n')
        except OSError:
            pass

    def _writer_json(self, payload: Dict[str, Any]) -> None:
        line = json.dumps(payload, ensure_ascii=False, default=_safe_str)
        self._append(line)
        if self._mirror and self._output:
            self._output.debug(line)

    def _writer_text(self, payload: Dict[str, Any]) -> None:
        data = payload.get('data') or {}
        pairs = []
        for k, v in (data.items() if isinstance(data, dict) else []):
            if isinstance(v, (dict, list)):
                v = json.dumps(v, ensure_ascii=False, default=_safe_str)
            pairs.append(f"{k}={v}")
        line = f"[{payload.get('ts')}] {payload.get('component')} {payload.get('aspect')}:{payload.get('event')} " + ' '.join(pairs)
        self._append(line)
        if self._mirror and self._output:
            from utils.output_utils import OutputLevel
            sev = (payload.get('severity') or '').lower()
            lvl = {'error': OutputLevel.ERROR, 'warning': OutputLevel.WARNING, 'debug': OutputLevel.DEBUG}.get(sev, OutputLevel.INFO)
            self._output.write(line, level=lvl)
