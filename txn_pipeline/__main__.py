from txn_pipeline.cli.runner import run_cli

run_cli()
