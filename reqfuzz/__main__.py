from reqfuzz.cli import main

main()
