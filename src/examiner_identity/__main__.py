from examiner_identity.presentation.cli.app import cli

cli()
