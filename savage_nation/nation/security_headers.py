# security_headers.py  (added to MIDDLEWARE after SecurityMiddleware)
from django.utils.deprecation import MiddlewareMixin


class SecurityHeadersMiddleware(MiddlewareMixin):
    def process_response(self, request, response):
        # --- Content Security Policy ---
        script_src = " ".join([
            "'self'",
            "'unsafe-inline'",
            "https://www.youtube.com",
        ])

        # Video pages embed YouTube players
        frame_src = " ".join([
            "'self'",
            "https://www.youtube.com",
            "https://www.youtube-nocookie.com",
        ])

        csp = (
            "default-src 'self'; "
            f"script-src {script_src}; "
            "style-src 'self' 'unsafe-inline' https:; "
            "img-src 'self' data: blob: https:; "
            "font-src 'self' data: https:; "
            "connect-src 'self'; "
            f"frame-src {frame_src}; "
            "frame-ancestors 'none'; "
            "upgrade-insecure-requests"
        )
        response.headers.setdefault("Content-Security-Policy", csp)

        # --- Permissions-Policy: lock down browser features ---
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")

        return response
