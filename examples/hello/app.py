"""Hello, synthesizers — the simplest synth server.

Demonstrates routes with a path parameter, trailing-slash tolerance,
method dispatch on the same path, and echoing a request body by piping
the input stream into the output stream.

Run:
    python app.py
"""

from synth import GET, POST, Server

server = Server()

LOGIN_FORM = """<!DOCTYPE html>
<html>
<body>
<form action="/login" method="POST">
<input type="text" name="username" placeholder="Username" /><br />
<input type="password" name="password" placeholder="Password" /><br />
<input type="submit" value="Login" />
</form>
</body>
</html>
"""


@server.route(GET, "/")
def index(req, res):
    res.write("Hello, synthesizers!")


@server.route(GET, "/hey")
def hey(req, res):
    res.write("yo")


@server.route(GET, "/person/:name")
def person(req, res):
    name = req.path.split("/")[2]
    res.write(f"Hello, {name}")


@server.route(GET, "/login")
def login_form(req, res):
    res.headers.set("content-type", "text/html; charset=UTF-8")
    res.write(LOGIN_FORM)


@server.route(POST, "/login")
def login(req, res):
    return req.input_stream.pipe(res.output_stream)


@server.route(GET, "/hello")
def hello(req, res):
    res.write("Hello, World!")


if __name__ == "__main__":
    print("Synthesizing on port 7000...")
    server.listen(port=7000)
