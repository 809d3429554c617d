from qfuncs.cli import main

main()
