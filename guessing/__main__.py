from guessing import main

main()
