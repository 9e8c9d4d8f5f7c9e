from create_toolchain import main

if __name__ == "__main__":
    main()
