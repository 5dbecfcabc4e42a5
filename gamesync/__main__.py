from gamesync.main import cli_entry

cli_entry()
