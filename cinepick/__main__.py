from cinepick.cli.main import main

main()
