# app.py  (LOCAL TARGET FOR TRYING THE URL INSPECTION)
#   python -m demo_lab.app
#   portscanner --url http://127.0.0.1:5055/
from flask import Flask, Response

HOME_PAGE = """<!doctype html><html><head>
<title>  Demo Lab Home  </title>
<meta name="description" content="Local page for trying portscanner --url">
<link rel="stylesheet" href="/static/bootstrap.min.css">
<link rel="stylesheet" href="/wp-content/themes/demo/style.css">
<script src="/static/jquery-3.7.1.min.js"></script>
</head><body>
<div id="root" data-reactroot=""><h1>Home</h1></div>
<p>Try /plain for a page without metadata.</p>
</body></html>"""

PLAIN_PAGE = "<!doctype html><html><body><p>Nothing to see here.</p></body></html>"


def create_app(robots: bool = True, security_headers: bool = True) -> Flask:
    app = Flask(__name__)

    @app.get("/")
    def home():
        return HOME_PAGE

    @app.get("/plain")
    def plain():
        return PLAIN_PAGE

    if robots:
        @app.get("/robots.txt")
        def robots_txt():
            return Response("User-agent: *\nDisallow: /plain\n", mimetype="text/plain")

    @app.after_request
    def add_headers(resp):
        resp.headers["X-Powered-By"] = "Flask"
        if security_headers:
            resp.headers["Content-Security-Policy"] = "default-src 'self'"
            resp.headers["X-Frame-Options"] = "DENY"
        return resp

    return app


app = create_app()


if __name__ == "__main__":
    # Print routes so you can see them in the console
    print("ROUTES:", app.url_map)
    app.run(host="127.0.0.1", port=5055, debug=False)
