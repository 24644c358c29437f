from ceprace.cli import app

app(prog_name="ceprace")
