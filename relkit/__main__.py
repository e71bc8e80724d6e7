from relkit.cli.app import main

main()
