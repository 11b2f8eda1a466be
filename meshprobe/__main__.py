from meshprobe.agent import main


if __name__ == "__main__":
    main()
