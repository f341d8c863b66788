from stacked_pr.main import cli

cli()
