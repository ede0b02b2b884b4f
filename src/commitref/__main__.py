from commitref.cli import main

main()
