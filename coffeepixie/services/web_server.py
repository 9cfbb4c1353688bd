"""HTTP form for setting the coffee trigger.

  GET  /            → Form with trigger time and coffee type, plus status
  POST /            → Apply form fields `trigger-time` and `trigger-type`
  GET  /api/status  → JSON: armed, trigger time, trigger type, next fire

trigger-type is one of the machine's actions ("espresso", "lungo"), which
binds that action and arms the timer, or "none", which disarms it.
"""

import html
import json
import logging
import threading
from http.server import HTTPServer, BaseHTTPRequestHandler
from socketserver import ThreadingMixIn
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse, parse_qs

from .coffee_timer import CoffeeTimer
from .config_manager import ConfigManager, ConfigError
from .. import config

logger = logging.getLogger(__name__)

NO_COFFEE = "none"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Coffee Pixie</title>
<style>
  body {{ font-family: sans-serif; max-width: 28em; margin: 2em auto; }}
  .status {{ margin: 1em 0; padding: 0.5em; background: #f3efe6; }}
  .error {{ color: #a00; }}
</style>
</head>
<body>
<h1>Coffee Pixie</h1>
<div class="status">{status}</div>
{error}
<form method="post" action="/">
  <p><label>Trigger time <input type="text" name="trigger-time" value="{trigger_time}"></label></p>
  <p>
    <label><input type="radio" name="trigger-type" value="espresso" {espresso_checked}> Espresso</label>
    <label><input type="radio" name="trigger-type" value="lungo" {lungo_checked}> Lungo</label>
    <label><input type="radio" name="trigger-type" value="none" {none_checked}> No coffee</label>
  </p>
  <p><input type="submit" value="Set"></p>
</form>
</body>
</html>"""


class PixieRequestHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the coffee form."""

    # Suppress default access logging (we log it ourselves)
    def log_message(self, format, *args):
        pass

    @property
    def app(self) -> "WebServer":
        return self.server.app

    def _send_json(self, data: dict, status: int = 200):
        """Send a JSON response."""
        body = json.dumps(data, indent=2, default=str).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_html(self, page: str, status: int = 200):
        """Send an HTML response."""
        body = page.encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'text/html; charset=utf-8')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        path = urlparse(self.path).path.rstrip('/')

        try:
            if path == '':
                self._send_html(self.app.render_page())
            elif path == '/api/status':
                self._send_json(self.app.status())
            else:
                self._send_json({'error': 'Not found'}, 404)
        except Exception as e:
            logger.error(f"GET {self.path} failed: {e}", exc_info=True)
            self._send_json({'error': str(e)}, 500)

    def do_POST(self):
        path = urlparse(self.path).path.rstrip('/')

        try:
            if path == '':
                length = int(self.headers.get('Content-Length', 0))
                form = parse_qs(self.rfile.read(length).decode('utf-8'))
                error = self.app.apply_form(
                    trigger_time=form.get('trigger-time', [''])[0],
                    trigger_type=form.get('trigger-type', [''])[0],
                )
                self._send_html(self.app.render_page(error))
            else:
                self._send_json({'error': 'Not found'}, 404)
        except Exception as e:
            logger.error(f"POST {self.path} failed: {e}", exc_info=True)
            self._send_json({'error': str(e)}, 500)


class ThreadingHTTPServer(ThreadingMixIn, HTTPServer):
    """HTTPServer that handles each request in a separate thread."""
    daemon_threads = True


class WebServer:
    """Form handling and HTTP server lifecycle."""

    def __init__(
        self,
        coffee_timer: CoffeeTimer,
        actions: Dict[str, Callable[[], None]],
        config_manager: Optional[ConfigManager] = None,
        port: int = config.WEB_PORT,
        host: str = '0.0.0.0',
        default_trigger_type: str = "espresso",
    ):
        self.coffee_timer = coffee_timer
        self.actions = actions
        self.config_manager = config_manager
        self.port = port
        self.host = host
        self.trigger_type = default_trigger_type
        self._server: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    # ── Form ──────────────────────────────────────────────────────

    def apply_form(self, trigger_time: str = "", trigger_type: str = "") -> Optional[str]:
        """Apply submitted form values. Returns an error message for the page, if any."""
        error = None
        trigger_time = trigger_time.strip()

        if trigger_time:
            if self.coffee_timer.set_trigger_time(trigger_time):
                self._persist_trigger_time(trigger_time)
            else:
                error = (f"'{trigger_time}' is not a valid time, "
                         f"keeping {self.coffee_timer.get_trigger_time()}")

        if trigger_type in self.actions:
            self.coffee_timer.set_action(self.actions[trigger_type])
            self.coffee_timer.arm()
            self.trigger_type = trigger_type
        elif trigger_type == NO_COFFEE:
            self.coffee_timer.disarm()
        elif trigger_type:
            logger.warning(f"Ignoring unknown trigger type '{trigger_type}'")

        if trigger_time or trigger_type:
            # status LEDs block for a couple of seconds; don't hold up the response
            threading.Thread(target=self.coffee_timer.show_armed_status, daemon=True).start()
        return error

    def _persist_trigger_time(self, trigger_time: str):
        if self.config_manager is None:
            return
        try:
            self.config_manager.update_trigger_time(trigger_time)
        except ConfigError as e:
            logger.error(f"Could not persist trigger time: {e}")

    def current_trigger_type(self) -> str:
        return self.trigger_type if self.coffee_timer.is_armed() else NO_COFFEE

    def status(self) -> Dict[str, Any]:
        next_fire = self.coffee_timer.next_fire_instant
        return {
            'armed': self.coffee_timer.is_armed(),
            'trigger_time': self.coffee_timer.get_trigger_time(),
            'trigger_type': self.current_trigger_type(),
            'next_fire': next_fire.isoformat() if next_fire else None,
        }

    def render_page(self, error: Optional[str] = None) -> str:
        trigger_type = self.current_trigger_type()
        trigger_time = self.coffee_timer.get_trigger_time()
        if trigger_type == NO_COFFEE:
            status = "Pixie is NOT MAKING COFFEE"
        else:
            status = (f"Pixie is making <b>{html.escape(trigger_type.upper())}</b> "
                      f"at {html.escape(trigger_time)}")
        return PAGE_TEMPLATE.format(
            status=status,
            error=f'<p class="error">{html.escape(error)}</p>' if error else '',
            trigger_time=html.escape(trigger_time),
            espresso_checked='checked' if trigger_type == 'espresso' else '',
            lungo_checked='checked' if trigger_type == 'lungo' else '',
            none_checked='checked' if trigger_type == NO_COFFEE else '',
        )

    # ── Lifecycle ─────────────────────────────────────────────────

    def start(self):
        """Start the web server in a background thread."""
        self._server = ThreadingHTTPServer((self.host, self.port), PixieRequestHandler)
        self._server.app = self
        # port 0 picks a free port
        self.port = self._server.server_address[1]
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            daemon=True,
            name='WebServer'
        )
        self._thread.start()
        logger.info(f"☕ Web form started: http://{self.host}:{self.port}/")

    def stop(self):
        """Stop the web server."""
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
            logger.info("Web server stopped")
