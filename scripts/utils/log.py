from colorama import Fore, Style


def h1(msg):
    print(
        f"\n\n{Fore.CYAN}-------------------------------------------------------------------------")
    print(f"{Fore.CYAN}{msg}{Style.RESET_ALL}\n")


def h2(msg):
    print(f"\n{Fore.LIGHTBLUE_EX}▸ {msg}{Style.RESET_ALL}\n")


def h3(msg):
    print(f"\t{Fore.GREEN}{msg}{Style.RESET_ALL}")


def warn(msg):
    print(f"\t{Fore.YELLOW}{msg}{Style.RESET_ALL}")


def error(msg):
    print(f"{Fore.RED}{msg}{Style.RESET_ALL}")


def info(msg):
    print(msg)


def table(rows, headers=("Label", "Info")):
    # rows is an iterable of (label, value) pairs
    rows = [(str(label), str(value)) for label, value in rows]
    widths = [
        max([len(headers[i])] + [len(row[i]) for row in rows])
        for i in range(len(headers))
    ]
    line = "+".join("-" * (w + 2) for w in widths)

    print(f"{Fore.YELLOW}+{line}+{Style.RESET_ALL}")
    print("| " + " | ".join(h.ljust(w) for h, w in zip(headers, widths)) + " |")
    print(f"{Fore.YELLOW}+{line}+{Style.RESET_ALL}")
    for row in rows:
        print("| " + " | ".join(v.ljust(w) for v, w in zip(row, widths)) + " |")
    print(f"{Fore.YELLOW}+{line}+{Style.RESET_ALL}")
