"""Rendering helpers for outcomes, message logs and the two HTML pages.

Everything here is a pure function of its arguments.
"""

import html
import json
from typing import Iterable, Optional

from .models.domain import Message, QueryOutcome

APP_TITLE = "SQL Data Analysis AI"
LOADING_TEXT = "Loading..."
PENDING_TEXT = "Analyzing your question..."
RESET_SENT_TEXT = "Password reset email sent! Please check your inbox."


def render_outcome(outcome: QueryOutcome) -> str:
    if outcome.status == "pending":
        return PENDING_TEXT
    if outcome.status == "succeeded":
        return json.dumps(outcome.payload, indent=2, ensure_ascii=False)
    if outcome.status == "failed":
        return f"Error: {outcome.message}"
    return ""


def render_messages(messages: Iterable[Message]) -> str:
    return "\n".join(f"[{m.kind}] {m.content}" for m in messages)


def _page(body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        "<html><head><meta charset=\"utf-8\">"
        f"<title>{APP_TITLE}</title></head>\n"
        f"<body><header><h1>{APP_TITLE}</h1></header>\n"
        f"<main>{body}</main>\n"
        f"<footer><p>{APP_TITLE}</p></footer></body></html>"
    )


def render_loading_page() -> str:
    return _page(f"<p>{LOADING_TEXT}</p>")


_LOGIN_HEADINGS = {
    "signin": ("Welcome Back", "Sign in to access your SQL data analysis tools"),
    "signup": ("Create Account", "Sign up to get started with SQL data analysis"),
    "reset": ("Reset Password", None),
}


def render_login_page(
    mode: str = "signin",
    error: Optional[str] = None,
    reset_sent: bool = False,
    email: str = "",
) -> str:
    """Sign-in, sign-up or password-reset form, all posting form-encoded data."""
    if mode not in _LOGIN_HEADINGS:
        mode = "signin"
    heading, subtitle = _LOGIN_HEADINGS[mode]
    email_value = html.escape(email, quote=True)

    parts = [f"<h2>{heading}</h2>"]
    if subtitle:
        parts.append(f"<p>{subtitle}</p>")
    if error:
        parts.append(f'<div class="error">{html.escape(error)}</div>')
    if reset_sent:
        parts.append(f'<div class="notice">{RESET_SENT_TEXT}</div>')

    email_input = (
        f'<input name="email" type="email" required value="{email_value}" '
        'placeholder="your@email.com">'
    )
    if mode == "reset":
        parts.append(
            '<form id="reset" method="post" action="/login/reset">'
            f"{email_input}"
            '<button type="submit">Send Reset Link</button></form>'
        )
        parts.append('<p><a href="/login">Back to sign in</a></p>')
        return _page("\n".join(parts))

    submit_label = "Sign In" if mode == "signin" else "Create Account"
    parts.append(
        f'<form id="{mode}" method="post" action="/login">'
        f'<input type="hidden" name="mode" value="{mode}">'
        f"{email_input}"
        '<input name="password" type="password" required minlength="6">'
        f'<button type="submit">{submit_label}</button></form>'
    )
    if mode == "signin":
        parts.append('<p><a href="/login?mode=reset">Forgot password?</a></p>')
        parts.append('<p>Don\'t have an account? <a href="/login?mode=signup">Sign up</a></p>')
    else:
        parts.append('<p>Already have an account? <a href="/login">Sign in</a></p>')
    return _page("\n".join(parts))


def render_dashboard_page(
    email: str,
    outcome: QueryOutcome,
    messages: Optional[Iterable[Message]] = None,
) -> str:
    disabled = " disabled" if outcome.status == "pending" else ""
    parts = [
        f"<p>Signed in as {html.escape(email)}</p>",
        '<form id="signout" method="post" action="/logout"><button type="submit">Sign Out</button></form>',
        "<h2>Analyze your SQL datasets with AI</h2>",
        '<form id="query" method="post" action="/dashboard">'
        '<textarea name="prompt" rows="3" placeholder="Ask a question about your data..."></textarea>'
        f'<button type="submit"{disabled}>Send</button></form>',
    ]
    if messages:
        parts.append(f"<pre class=\"messages\">{html.escape(render_messages(messages))}</pre>")
    rendered = render_outcome(outcome)
    if rendered:
        parts.append(f'<pre class="outcome {outcome.status}">{html.escape(rendered)}</pre>')
    return _page("\n".join(parts))
