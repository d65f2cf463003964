"""
Word lists — Built-in corpora

COMMON_TYPOS is the known-bad corpus for the lexical scanner.
PROGRAMMING_WORDS is the default known-good dictionary; it contains the
intended spelling of every common typo so fuzzy suggestions can find it.

Both are starting points. Hosts load project or user dictionaries on top.
"""

COMMON_TYPOS = (
    "funtion", "functoin", "funciton", "contructor", "cosntructor",
    "consle", "conosle", "cosnole", "varable", "varaible", "vairable",
    "docment", "docuemnt", "docmunet", "componnet", "componenet", "compnent",
    "retunr", "retrun", "asnyc", "asycn", "awai", "awiat", "promse",
    "resolv", "rejct", "catach", "thne", "lenght", "lengt", "prperty",
    "undefinded", "booleon", "numbar", "srtring", "arrya", "objcet",
    "elemnt", "attriubte", "eveent", "listner", "handeler", "clieck",
    "submitt", "resposne", "requset", "stauts", "eror", "sucess",
    "implemnt", "overide", "extned", "pbulic", "prvate", "procted",
    "statci", "abstact", "interace", "enmu", "moduel", "packge",
    "importt", "exprot", "defualt", "namspace", "tyep", "clsas",
    "whiel", "swich", "brek", "contiune", "thrwo", "finnaly",
    "decralation", "decleration", "declaretion", "initilization", "intialization",
    "algorithim", "algorythm", "parametar", "paramater", "arguement", "arguemnt",
    "dependancy", "dependecy", "utilitiy", "utilty", "configuartion", "configration",
    "authoriztion", "autherization", "authentacation", "authentacion", "redirec",
    "optimazation", "exectute", "generatte",
    "recive", "reciev", "definision", "definiton", "implimentation", "implamentation",
)

PROGRAMMING_WORDS = (
    # Keywords
    "abstract", "async", "await", "break", "case", "catch", "class", "const",
    "continue", "default", "delete", "else", "enum", "export", "extends",
    "false", "finally", "function", "implements", "import", "interface",
    "let", "module", "namespace", "new", "null", "package", "private",
    "protected", "public", "return", "static", "super", "switch", "this",
    "throw", "true", "type", "typeof", "undefined", "var", "void", "while",
    "yield", "lambda", "pass", "raise", "self", "with", "def", "elif",
    # Types and values
    "array", "boolean", "number", "object", "string", "symbol", "promise",
    "integer", "float", "double", "char", "tuple", "list", "dict", "set", "map",
    # Common vocabulary
    "argument", "arguments", "attribute", "authentication", "authorization",
    "algorithm", "button", "cache", "callback", "click", "client", "component",
    "config", "configuration", "console", "constructor", "context", "count",
    "declaration", "definition", "dependency", "document", "element", "error",
    "event", "execute", "generate", "handle", "handler", "index", "init",
    "initialization", "implement", "implementation", "input", "item", "items",
    "key", "length", "listener", "log", "message", "method", "name", "node",
    "optimization", "option", "options", "output", "override", "parameter",
    "parse", "path", "property", "query", "receive", "redirect", "reject",
    "request", "resolve", "response", "result", "route", "server", "state",
    "status", "submit", "success", "target", "then", "user", "utility",
    "value", "values", "variable", "window",
)
