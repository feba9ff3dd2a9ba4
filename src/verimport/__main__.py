from verimport.cli import main

main()
