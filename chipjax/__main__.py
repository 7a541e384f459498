from chipjax.cli import main

main()
