"""
Gated page serving — /, /login, /signup, /dashboard, /editor.

Every view goes through the same SessionGate the editor engine uses:
signed-out visitors land on /login, signed-in visitors skip the
sign-in views and land on /dashboard.
"""

from __future__ import annotations

import html

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from backend.auth import get_identity_context
from engine.editor import share_codec
from engine.editor.gate import ENTRY_VIEW, SIGN_IN_VIEW, IdentityContext, SessionGate
from engine.editor.preview import sandboxed_frame
from engine.editor.types import PLACEHOLDER_CODE, TUTORIALS, DecodeError

router = APIRouter(tags=["pages"])

_HEADERS = {
    "Cache-Control": "no-store",
    "X-Content-Type-Options": "nosniff",
}

FEATURES = [
    ("AI Code Suggestions", "Describe what you want and fold the generated code into your editor."),
    ("Live Preview", "See your HTML rendered in a sandboxed frame as you type."),
    ("Share Links", "Send your code to anyone as a single link."),
]

_AUTH_SCRIPT = """
<script>
document.getElementById("auth-form").addEventListener("submit", async (e) => {
  e.preventDefault();
  const form = e.target;
  const res = await fetch(form.dataset.action, {
    method: "POST",
    headers: {"Content-Type": "application/json"},
    body: JSON.stringify({email: form.email.value, password: form.password.value}),
  });
  if (res.ok) { window.location = "/dashboard"; return; }
  const body = await res.json().catch(() => ({}));
  // Validation failures carry a list of errors in detail
  document.getElementById("auth-error").textContent =
    typeof body.detail === "string" ? body.detail : "Something went wrong.";
});
</script>
"""

_SIGN_OUT_SCRIPT = """
<script>
document.getElementById("sign-out").addEventListener("click", async () => {
  await fetch("/auth/signout", {method: "POST"});
  window.location = "/login";
});
</script>
"""


def _page(title: str, body: str) -> HTMLResponse:
    document = (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="utf-8">\n'
        f"<title>{html.escape(title)} · DevPilot</title>\n"
        "</head>\n<body>\n"
        f"{body}\n"
        "</body>\n</html>\n"
    )
    return HTMLResponse(content=document, headers=_HEADERS)


def _gate(view: str, context: IdentityContext) -> RedirectResponse | None:
    """Run the session gate for `view`; return a redirect if it sends the visitor elsewhere."""
    gate = SessionGate(context)
    try:
        rendered = gate.enter(view)
    finally:
        gate.close()
    if rendered == view:
        return None
    return RedirectResponse(url=f"/{rendered}", status_code=303)


def _auth_form(heading: str, action: str, submit: str, alt_href: str, alt_text: str) -> str:
    return (
        f"<h1>{heading}</h1>\n"
        f'<form id="auth-form" data-action="{action}">\n'
        '<input name="email" type="email" placeholder="Email" required>\n'
        '<input name="password" type="password" placeholder="Password" required>\n'
        f'<button type="submit">{submit}</button>\n'
        "</form>\n"
        '<p id="auth-error" role="alert"></p>\n'
        f'<p><a href="{alt_href}">{alt_text}</a></p>\n'
        f"{_AUTH_SCRIPT}"
    )


@router.get("/", response_class=HTMLResponse)
async def index(context: IdentityContext = Depends(get_identity_context)) -> Response:
    """Entry point: dashboard when signed in, sign-in view otherwise."""
    target = ENTRY_VIEW if context.current_identity() else SIGN_IN_VIEW
    return RedirectResponse(url=f"/{target}", status_code=303)


@router.get("/login", response_class=HTMLResponse)
async def login_page(context: IdentityContext = Depends(get_identity_context)) -> Response:
    redirect = _gate("login", context)
    if redirect:
        return redirect
    return _page(
        "Sign in",
        _auth_form("Sign in", "/auth/signin", "Sign in", "/signup", "Need an account? Sign up"),
    )


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(context: IdentityContext = Depends(get_identity_context)) -> Response:
    redirect = _gate("signup", context)
    if redirect:
        return redirect
    return _page(
        "Sign up",
        _auth_form("Create an account", "/auth/signup", "Sign up", "/login", "Have an account? Sign in"),
    )


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard_page(context: IdentityContext = Depends(get_identity_context)) -> Response:
    """Feature overview with a link into the editor."""
    redirect = _gate("dashboard", context)
    if redirect:
        return redirect
    identity = context.current_identity()
    cards = "\n".join(
        f'<section class="feature"><h2>{html.escape(name)}</h2><p>{html.escape(blurb)}</p></section>'
        for name, blurb in FEATURES
    )
    body = (
        "<h1>Dashboard</h1>\n"
        f"<p>Signed in as {html.escape(identity.email or identity.uid)}</p>\n"
        f"{cards}\n"
        '<p><a href="/editor">Open the editor</a></p>\n'
        '<button id="sign-out">Sign out</button>\n'
        f"{_SIGN_OUT_SCRIPT}"
    )
    return _page("Dashboard", body)


@router.get("/editor", response_class=HTMLResponse)
async def editor_page(
    code: str | None = None,
    context: IdentityContext = Depends(get_identity_context),
) -> Response:
    """
    Editor view.

    A `code` share token seeds the buffer. Corrupted tokens fall back to the
    placeholder with a notice instead of failing the page.
    """
    redirect = _gate("editor", context)
    if redirect:
        return redirect

    text = PLACEHOLDER_CODE
    notice = ""
    if code:
        try:
            text = share_codec.decode(code)
        except DecodeError as e:
            notice = f'<p class="notice" role="alert">{html.escape(e.message)}</p>\n'

    tutorials = "\n".join(
        f"<li><h3>{html.escape(t['title'])}</h3><p>{html.escape(t['content'])}</p></li>" for t in TUTORIALS
    )
    body = (
        "<h1>Editor</h1>\n"
        f"{notice}"
        f'<textarea id="code" rows="20" cols="80">{html.escape(text)}</textarea>\n'
        "<h2>Preview</h2>\n"
        f"{sandboxed_frame(text)}\n"
        "<h2>Tutorials</h2>\n"
        f"<ul>{tutorials}</ul>\n"
    )
    return _page("Editor", body)
