"""Programs bundled with the playground: the starting code and the
examples offered in the editor's example menu."""

DEFAULT_CODE = """\
// Welcome to the Orus Playground!
// Try running this example to see how Orus works.

fn main() {
    // Print a greeting
    print("Hello, Orus!");

    // Define variables
    let name = "World";
    let year = 2025;

    // String interpolation
    print("Hello, {name}! It's currently {year}.");

    // Simple calculation
    let result = calculate_sum(5, 7);
    print("5 + 7 = {result}");
}

fn calculate_sum(a: i32, b: i32) -> i32 {
    return a + b;
}"""

HELLO_WORLD = """\
// Hello World Example
fn main() {
    print("Hello, World!");
}"""

FIBONACCI = """\
// Fibonacci Sequence Example
fn main() {
    print("Fibonacci Sequence:");
    for i in range(0, 9) {
        let value = fibonacci(i);
        print("fib({i}) = {value}");
    }
}

fn fibonacci(n: i32) -> i32 {
    if n <= 1 {
        return n;
    } else {
        return fibonacci(n - 1) + fibonacci(n - 2);
    }
}"""

ARRAYS = """\
// Arrays Example
fn main() {
    let mut scores = [90, 72, 85];
    scores = push(scores, 64);

    let total = sum(scores);
    let count = len(scores);
    print("Scores: {scores}");
    print("Total: {total} over {count} tests");
    print("Best: " + max(scores) + ", worst: " + min(scores));

    for score in scores {
        if score >= 80 {
            print("{score} passed with distinction");
        } else if score >= 70 {
            print("{score} passed");
        } else {
            print("{score} failed");
        }
    }
}"""

LOOPS = """\
// Loops Example
fn main() {
    let mut n = 27;
    let mut steps = 0;
    while n != 1 {
        if n % 2 == 0 {
            n = n / 2;
        } else {
            n = 3 * n + 1;
        }
        steps = steps + 1;
    }
    print("Collatz steps for 27: {steps}");

    for i in range(1, 10) {
        if i % 2 == 0 {
            continue;
        }
        if i > 7 {
            break;
        }
        print(i);
    }
}"""

EXAMPLES = {
    'default': DEFAULT_CODE,
    'hello-world': HELLO_WORLD,
    'fibonacci': FIBONACCI,
    'arrays': ARRAYS,
    'loops': LOOPS,
}
