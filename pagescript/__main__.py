from pagescript.cli import run

run()
