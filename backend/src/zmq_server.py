import json
import logging
import re
import time
import uuid

import sentry_sdk
import zmq

from engine.export import PlaceholderExporter, load_tapes
from engine.generator import PatternGenerator, get_default_generator
from engine.models import PatternConfig
from engine.svg import render_svg
from patterns import registry
from security import (
    validate_config,
    validate_identity,
    validate_output_dir,
    validate_tapes_path,
)

logger = logging.getLogger(__name__)

_CLIP_ID = re.compile(r"^[A-Za-z][A-Za-z0-9_-]{0,63}$")


def _decode(raw: bytes) -> dict:
    """Parse a request frame; only JSON objects are valid messages."""
    message = json.loads(raw)
    if not isinstance(message, dict):
        raise ValueError("message is not a JSON object")
    return message


class PatternServer:
    def __init__(self, generator: PatternGenerator | None = None):
        self.context = zmq.Context()
        self.socket = self.context.socket(zmq.REP)
        self.socket.setsockopt(zmq.MAXMSGSIZE, 1_048_576)  # 1 MB limit
        self.port = self.socket.bind_to_random_port("tcp://127.0.0.1")
        # Dedicated ping socket — never blocked by long exports or dense patterns
        self.ping_socket = self.context.socket(zmq.REP)
        self.ping_socket.setsockopt(zmq.MAXMSGSIZE, 4096)  # 4 KB limit (pings only)
        self.ping_port = self.ping_socket.bind_to_random_port("tcp://127.0.0.1")
        # Auth token — prevents unauthorized ZMQ access from other local processes
        self.token = str(uuid.uuid4())
        self.start_time = time.time()
        self.running = False
        self.generator = generator if generator is not None else get_default_generator()
        self.exporter = PlaceholderExporter(self.generator)
        self.last_generate_ms = 0.0

    def reset_state(self):
        """Clear accumulated state without closing sockets/context.

        Used by session-scoped test fixtures to reset between tests
        while keeping the server running.
        """
        self.generator.clear_cache()
        self.generator.flush_timing()

        # Cancel any in-flight export
        self.exporter.cancel()
        self.exporter = PlaceholderExporter(self.generator)

        self.last_generate_ms = 0.0

    def _validate_token(self, message: dict) -> str | None:
        """Validate auth token. Returns error message or None if valid."""
        msg_token = message.get("_token")
        if msg_token != self.token:
            return "invalid or missing auth token"
        return None

    def _make_ping_response(self, msg_id: str | None) -> dict:
        return {
            "id": msg_id,
            "status": "alive",
            "uptime_s": round(time.time() - self.start_time, 1),
            "last_generate_ms": self.last_generate_ms,
        }

    def handle_message(self, message: dict) -> dict:
        cmd = message.get("cmd")
        msg_id = message.get("id")

        # Auth token required on all commands
        token_err = self._validate_token(message)
        if token_err:
            return {"id": msg_id, "ok": False, "error": token_err}

        if cmd == "ping":
            return self._make_ping_response(msg_id)
        elif cmd == "shutdown":
            self.running = False
            return {"id": msg_id, "ok": True}
        elif cmd == "list_patterns":
            return {
                "id": msg_id,
                "ok": True,
                "patterns": registry.list_all(),
                "registry_version": registry.REGISTRY_VERSION,
                "fingerprint": registry.registry_fingerprint(),
            }
        elif cmd == "generate_pattern":
            return self._handle_generate_pattern(message, msg_id)
        elif cmd == "pattern_meta":
            return self._handle_pattern_meta(message, msg_id)
        elif cmd == "render_svg":
            return self._handle_render_svg(message, msg_id)
        elif cmd == "clear_cache":
            self.generator.clear_cache()
            return {"id": msg_id, "ok": True}
        elif cmd == "cache_stats":
            return {
                "id": msg_id,
                "ok": True,
                **self.generator.cache.stats(),
                "computations": self.generator.computations,
                "timing": self.generator.generation_stats(),
            }
        elif cmd == "export_start":
            return self._handle_export_start(message, msg_id)
        elif cmd == "export_status":
            return self._handle_export_status(msg_id)
        elif cmd == "export_cancel":
            return self._handle_export_cancel(msg_id)
        else:
            return {"id": msg_id, "ok": False, "error": f"unknown: {cmd}"}

    def _parse_request(self, message: dict):
        """Pull identity + config out of a message.

        Returns ((creator, title, year, config), None) or (None, error).
        """
        creator = message.get("creator_name", "")
        title = message.get("item_title", "")
        year = message.get("year")
        # Years arrive as numbers from JSON clients
        if isinstance(year, int) and not isinstance(year, bool):
            year = str(year)
        raw_config = message.get("config")

        errors = validate_identity(creator, title, year) + validate_config(raw_config)
        if errors:
            return None, "; ".join(errors)
        return (creator, title, year, PatternConfig.from_dict(raw_config)), None

    def _generate(self, creator, title, year, config):
        t0 = time.time()
        pattern = self.generator.generate_pattern(creator, title, year, config)
        self.last_generate_ms = round((time.time() - t0) * 1000, 2)
        return pattern

    def _handle_generate_pattern(self, message: dict, msg_id: str | None) -> dict:
        request, error = self._parse_request(message)
        if error:
            return {"id": msg_id, "ok": False, "error": error}

        try:
            pattern = self._generate(*request)
            return {"id": msg_id, "ok": True, "pattern": pattern.to_dict()}
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.error("Generate handler error: %s", type(e).__name__)
            return {"id": msg_id, "ok": False, "error": "Internal processing error"}

    def _handle_pattern_meta(self, message: dict, msg_id: str | None) -> dict:
        request, error = self._parse_request(message)
        if error:
            return {"id": msg_id, "ok": False, "error": error}

        try:
            meta = self.generator.pattern_meta(*request)
            return {"id": msg_id, "ok": True, "meta": meta.to_dict()}
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.error("Pattern meta handler error: %s", type(e).__name__)
            return {"id": msg_id, "ok": False, "error": "Internal processing error"}

    def _handle_render_svg(self, message: dict, msg_id: str | None) -> dict:
        request, error = self._parse_request(message)
        if error:
            return {"id": msg_id, "ok": False, "error": error}

        clip_id = message.get("clip_id", "label-clip")
        if not isinstance(clip_id, str) or not _CLIP_ID.match(clip_id):
            return {"id": msg_id, "ok": False, "error": "invalid clip_id"}

        try:
            pattern = self._generate(*request)
            return {"id": msg_id, "ok": True, "svg": render_svg(pattern, clip_id)}
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.error("Render handler error: %s", type(e).__name__)
            return {"id": msg_id, "ok": False, "error": "Internal processing error"}

    def _handle_export_start(self, message: dict, msg_id: str | None) -> dict:
        tapes_path = message.get("tapes_path")
        output_dir = message.get("output_dir")
        if not tapes_path:
            return {"id": msg_id, "ok": False, "error": "missing tapes_path"}
        if not output_dir:
            return {"id": msg_id, "ok": False, "error": "missing output_dir"}

        errors = validate_tapes_path(tapes_path)
        if errors:
            return {"id": msg_id, "ok": False, "error": "; ".join(errors)}

        # Prevents writing to system dirs
        out_errors = validate_output_dir(output_dir)
        if out_errors:
            return {"id": msg_id, "ok": False, "error": "; ".join(out_errors)}

        raw_config = message.get("config")
        cfg_errors = validate_config(raw_config)
        if cfg_errors:
            return {"id": msg_id, "ok": False, "error": "; ".join(cfg_errors)}

        try:
            tapes = load_tapes(tapes_path)
        except (OSError, ValueError) as e:
            logger.warning("Unreadable tapes file: %s", type(e).__name__)
            return {"id": msg_id, "ok": False, "error": "tapes file is not valid JSON"}

        try:
            self.exporter.config = PatternConfig.from_dict(raw_config)
            job = self.exporter.start(tapes, output_dir)
            return {"id": msg_id, "ok": True, "total": job.total, "skipped": job.skipped}
        except RuntimeError as e:
            return {"id": msg_id, "ok": False, "error": str(e)}
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.error("Export start error: %s", type(e).__name__)
            return {"id": msg_id, "ok": False, "error": "Internal processing error"}

    def _handle_export_status(self, msg_id: str | None) -> dict:
        try:
            status = self.exporter.get_status()
            status["id"] = msg_id
            status["ok"] = True
            return status
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.error("Export status error: %s", type(e).__name__)
            return {"id": msg_id, "ok": False, "error": "Internal processing error"}

    def _handle_export_cancel(self, msg_id: str | None) -> dict:
        try:
            cancelled = self.exporter.cancel()
            return {"id": msg_id, "ok": True, "cancelled": cancelled}
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.error("Export cancel error: %s", type(e).__name__)
            return {"id": msg_id, "ok": False, "error": "Internal processing error"}

    def run(self):
        self.running = True
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self.ping_socket, zmq.POLLIN)
        try:
            while self.running:
                events = dict(poller.poll(timeout=500))

                # Handle ping socket first (lightweight, never blocked)
                if self.ping_socket in events:
                    try:
                        message = _decode(self.ping_socket.recv())
                        msg_id = message.get("id")
                        token_err = self._validate_token(message)
                        if token_err:
                            self.ping_socket.send_json(
                                {"id": msg_id, "ok": False, "error": token_err}
                            )
                        else:
                            self.ping_socket.send_json(self._make_ping_response(msg_id))
                    except ValueError:  # JSONDecodeError, bad UTF-8, non-object
                        self.ping_socket.send_json(
                            {"ok": False, "error": "Invalid message format"}
                        )
                    except zmq.ZMQError:
                        logger.error("ZMQ error on ping socket")
                        break  # socket state is unrecoverable

                # Handle main command socket
                if self.socket in events:
                    try:
                        message = _decode(self.socket.recv())
                    except ValueError:  # JSONDecodeError, bad UTF-8, non-object
                        # MUST send reply before next recv (REP protocol)
                        self.socket.send_json(
                            {"ok": False, "error": "Invalid message format"}
                        )
                        continue
                    except zmq.ZMQError:
                        logger.error("ZMQ error on main socket")
                        break

                    try:
                        response = self.handle_message(message)
                    except Exception as e:
                        sentry_sdk.capture_exception(e)
                        logger.error("Unhandled handler error: %s", type(e).__name__)
                        response = {"ok": False, "error": "Internal processing error"}

                    self.socket.send_json(response)
        finally:
            self.close()

    def close(self):
        self.exporter.cancel()
        self.ping_socket.close()
        self.socket.close()
        self.context.term()
