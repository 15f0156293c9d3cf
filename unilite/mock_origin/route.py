"""
A stand-in university portal for local demonstration.

Point ``ORIGIN_BASE_URL`` at this service and browse ``/mock-erp`` through
``/proxy`` to walk the login flow end to end: an access-denied page, a login
form gated by a fixed CAPTCHA code, and a dashboard behind a session cookie.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Form, Query, status
from fastapi.responses import HTMLResponse, RedirectResponse

from unilite.vars import MOCK_CAPTCHA_CODE

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

SESSION_COOKIE_NAME = "erp_session"
SESSION_COOKIE_VALUE = "valid_token_123"
INVALID_CAPTCHA_MESSAGE = "Invalid CAPTCHA! Please try again."

ACCESS_DENIED_PAGE = """
<html>
    <body>
        <h1>Access Denied</h1>
        <p>No valid session. Please <a href="/mock-erp?login_page=true">Login here</a>.</p>
    </body>
</html>
"""

LOGIN_PAGE = """
<html>
    <head><title>Mock ERP Login</title></head>
    <body style="padding: 50px; font-family: sans-serif;">
        <div style="max-width:300px; margin:auto; border:1px solid #ccc; padding:20px; border-radius:10px;">
            <h2>University Login</h2>
            <form action="/mock-login" method="POST">
                <input type="text" name="user" placeholder="Roll No"><br>
                <input type="password" name="pass" placeholder="Password"><br>
                <div class="captcha-box"><strong>CAPTCHA: {code}</strong></div>
                <input type="text" name="captcha" placeholder="Enter CAPTCHA"><br>
                <button type="submit">Sign In</button>
            </form>
            <p style="font-size:12px; color:#666;">* Solving this CAPTCHA is required by university policy.</p>
        </div>
    </body>
</html>
"""

DASHBOARD_PAGE = """
<html>
    <head><title>Official University Dashboard</title></head>
    <body style="background:#f0f2f5;">
        <header style="background:white; padding:20px;">
            <h1>Student Portal Dashboard</h1>
            <p>Welcome, Test Student | Last Login: Today</p>
        </header>
        <main style="max-width:800px; margin:20px auto; background:white; padding:20px;">
            <h3>Academic Progress</h3>
            <table border="1" style="width:100%; border-collapse:collapse;">
                <tr style="background:#eee;"><th>Semester</th><th>GPA</th><th>Attendance</th></tr>
                <tr><td>Sem 5</td><td>8.8</td><td>92%</td></tr>
                <tr><td>Sem 4</td><td>8.5</td><td>88%</td></tr>
            </table>
            <div style="margin-top:20px;">
                <h4>Notifications</h4>
                <ul>
                    <li>Exam fees due by 15th Feb.</li>
                    <li>Library book return overdue.</li>
                </ul>
            </div>
        </main>
        <footer style="padding:20px; text-align:center; color:#999;">&copy; 2026 Mock University ERP Systems</footer>
    </body>
</html>
"""


@router.get("/mock-erp", response_class=HTMLResponse)
async def mock_erp(
    login_page: Optional[str] = Query(None),
    erp_session: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
):
    if login_page:
        return HTMLResponse(LOGIN_PAGE.replace("{code}", MOCK_CAPTCHA_CODE))
    if not erp_session:
        logger.info("[MockOrigin] No session cookie, serving access denied page")
        return HTMLResponse(ACCESS_DENIED_PAGE)
    return HTMLResponse(DASHBOARD_PAGE)


@router.post("/mock-login")
async def mock_login(
    user: Optional[str] = Form(None),
    password: Optional[str] = Form(None, alias="pass"),
    captcha: Optional[str] = Form(None),
):
    if captcha != MOCK_CAPTCHA_CODE:
        logger.info(f"[MockOrigin] Rejected login for {user!r}: wrong CAPTCHA")
        return HTMLResponse(INVALID_CAPTCHA_MESSAGE)

    logger.info(f"[MockOrigin] Login accepted for {user!r}")
    response = RedirectResponse(url="/mock-erp", status_code=status.HTTP_302_FOUND)
    response.set_cookie(SESSION_COOKIE_NAME, SESSION_COOKIE_VALUE, httponly=True)
    return response
