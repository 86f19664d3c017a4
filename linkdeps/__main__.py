from linkdeps.cli import app

app()
