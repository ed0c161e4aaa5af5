from listkeeper.cli.commands import app

app()
