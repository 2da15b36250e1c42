from flask import request

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Content-Security-Policy': "default-src 'self'; style-src 'self' 'unsafe-inline';",
    'Referrer-Policy': 'strict-origin-when-cross-origin',
    'Permissions-Policy': 'geolocation=(), microphone=(), camera=()'
}


def add_security_headers(response):
    """
    Security headers for every dashboard response

    Args:
        response: Flask response object

    Returns:
        Flask response object with security headers added; API responses
        are additionally marked as not cacheable
    """
    for header, value in SECURITY_HEADERS.items():
        response.headers[header] = value

    if request.path.startswith('/api/'):
        response.headers['Cache-Control'] = 'no-store'

    return response
