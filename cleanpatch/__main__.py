from cleanpatch.cli import app

app()
