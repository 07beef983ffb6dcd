from migraplan.cli import main

main()
