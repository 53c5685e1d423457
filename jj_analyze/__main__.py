from jj_analyze.cli import app

app()
