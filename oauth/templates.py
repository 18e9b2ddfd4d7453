"""HTML template for the callback handshake page.

The page runs in the popup opened by the CMS. It announces itself to the
opener with a wildcard-targeted ``authorizing:<provider>`` message, waits for
the opener to answer, and only then posts the result to the answering
window, provided it is the origin the flow was started for.

The result message has the form ``authorization:<provider>:<status>:<json>``
(the Decap/Netlify CMS convention).
"""

import html
import json

HANDSHAKE_PAGE = """<!doctype html>
<html>
<head>
    <meta charset="utf-8"/>
    <title>{title}</title>
</head>
<body data-provider="{provider}" data-origin="{origin}">
<pre id="authorization-result" hidden>{message}</pre>
<script>
  (function() {{
    var provider = document.body.getAttribute("data-provider");
    var expectedOrigin = document.body.getAttribute("data-origin");
    var message = document.getElementById("authorization-result").textContent;

    function receiveMessage(e) {{
      if (e.origin !== expectedOrigin) {{
        console.log("Ignoring message from %s", e.origin);
        return;
      }}
      window.removeEventListener("message", receiveMessage, false);
      // send result to the window that opened the popup
      window.opener.postMessage(message, e.origin);
    }}

    window.addEventListener("message", receiveMessage, false);

    // Start handshake with parent
    console.log("Sending message: %o", provider);
    window.opener.postMessage("authorizing:" + provider, "*");
  }})();
</script>
<p>{text}</p>
</body>
</html>
"""

_PAGE_TEXT = {
    "success": ("Auth Complete", "Authentication complete. You can close this window."),
    "error": ("Auth Error", "Authentication failed. You can close this window."),
}


def handshake_message(status: str, content: dict, provider: str = "github") -> str:
    """Result message relayed to the opener window."""
    payload = json.dumps(content, separators=(",", ":"))
    return f"authorization:{provider}:{status}:{payload}"


def render_handshake_page(status: str, content: dict, origin: str, provider: str = "github") -> str:
    """Render the handshake page for a success or error result.

    Args:
        status: "success" or "error".
        content: JSON-serializable result ({"token", "provider"} or {"error"}).
        origin: The state-validated origin allowed to receive the result.
        provider: Provider name used in both handshake messages.
    """
    title, text = _PAGE_TEXT[status]
    return HANDSHAKE_PAGE.format(
        title=title,
        text=text,
        provider=html.escape(provider),
        origin=html.escape(origin),
        message=html.escape(handshake_message(status, content, provider), quote=False),
    )
