from aoclang.errors import runtime_error


class BasicIO:
    def read_file(self, filename: str) -> str:
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            raise runtime_error(f"could not read {filename}: file not found")
        except PermissionError:
            raise runtime_error(f"could not read {filename}: permission denied")
        except (OSError, UnicodeDecodeError) as e:
            raise runtime_error(f"could not read {filename}: {e}")
