from kilo.cli import main

main()
