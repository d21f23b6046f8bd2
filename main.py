from calcvm.cli import main

# lexer -> parser -> codegen -> vm


if __name__ == '__main__':
    main()
