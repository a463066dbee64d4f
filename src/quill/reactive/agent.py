"""Client sync agent — the script every served page carries.

Injected inline at the end of the document body.  In the browser it:

1. Debounces ``input`` events on the editable body and, once typing
   pauses, POSTs the body markup (minus any ``<script>`` nodes, so the
   agent never writes itself into the document) back to ``/``.
2. Opens one ``EventSource`` on the events endpoint.  A ``style`` message
   re-fetches the stylesheet with a cache-busting query; anything else
   reloads the page.

The events URL is relative, so the stream always uses the same scheme
(http/https) as the page itself.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from quill.reactive.broadcaster import STYLE_MESSAGE

if TYPE_CHECKING:
    from quill.config import QuillConfig

EVENTS_ENDPOINT = "/__quill/events"

AGENT_ATTR = "data-quill-agent"

# Placeholders are substituted with JSON literals by render_agent_script().
# The body must never contain an end-tag sequence; the HTML parser would
# close the script early.
_AGENT_SCRIPT = """\
<script data-quill-agent>
(function() {
  var parser = new DOMParser();
  var timer;
  document.body.addEventListener('input', function() {
    if (timer) clearTimeout(timer);
    timer = setTimeout(function() {
      timer = undefined;
      var doc = parser.parseFromString(document.body.innerHTML, 'text/html');
      doc.querySelectorAll('script').forEach(function(el) { el.remove(); });
      fetch('/', { method: 'POST', body: doc.body.innerHTML });
    }, __DEBOUNCE_MS__);
  });
  var events = new EventSource(__EVENTS_URL__);
  events.onmessage = function(e) {
    if (e.data === __STYLE_MESSAGE__) {
      var link = document.querySelector('link[rel="stylesheet"]');
      if (link) link.href = __STYLESHEET_HREF__ + '?t=' + Date.now();
    } else {
      location.reload();
    }
  };
})();
</script>
"""


def render_agent_script(config: QuillConfig) -> str:
    """Return the agent ``<script>`` markup for *config*."""
    return (
        _AGENT_SCRIPT
        .replace("__DEBOUNCE_MS__", str(int(config.debounce_ms)))
        .replace("__EVENTS_URL__", json.dumps(EVENTS_ENDPOINT))
        .replace("__STYLE_MESSAGE__", json.dumps(STYLE_MESSAGE))
        .replace("__STYLESHEET_HREF__", json.dumps(config.stylesheet_href))
    )
