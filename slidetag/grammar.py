"""
SlideTag markup: an XML-like language for describing slides as nested, tagged elements.

    <Slide background="#0f172a">
      <!-- comments are allowed wherever whitespace is -->
      <SlideTitle fill="#ffffff">Quarterly results</SlideTitle>
      <Card x={80} y={200} width={600}>
        <Text fontSize={24}>Revenue grew <B>35%</B> year over year</Text>
      </Card>
    </Slide>

SYNTAX

Every element is either self-closing <Tag attr=... /> or has a body that ends with a closing tag </Tag>,
whose name must repeat the opening name exactly (the check is done by the parser, not the grammar).
The body of an element is a sequence of child elements, comments and raw text.

Attribute values take one of two forms:
 "..."    a string; XML entities (&amp; &lt; &gt; &quot; &apos;) are decoded
 {...}    a literal: number {24}, boolean {true}, array {["a", "b"]}, or a quoted string {"x"};
          braces may nest, and double-quoted strings inside braces are opaque, so "{" or "}" inside them
          doesn't count towards nesting

Comments <!-- ... --> don't nest; an unterminated comment extends to the end of input.

The `document` rule parses a single top-level element, `batch` parses any number of elements written back-to-back.
"""


########################################################################################################################################################
#####
#####  GRAMMAR
#####

# Names of rules matter: they are reported in parsimonious' ParseError when a rule fails at the furthest position
# reached in the input, and the parser converts them into error messages (see parser.SYNTAX_MESSAGES).

grammar = r"""

###  DOCUMENT

document         =  skip element skip end
batch            =  skip (element skip)* end

###  ELEMENTS

element          =  '<' skip tag_name attrs skip (empty_end / body_end)
empty_end        =  '/>'
body_end         =  '>' content close

content          =  (comment / element / text)*
close            =  '</' skip close_name skip close_end
close_end        =  '>'

text             =  ~"[^<]+"

###  ATTRIBUTES

attrs            =  (skip attr)*
attr             =  attr_name skip equals skip value
equals           =  '='

value            =  quoted / braced
quoted           =  ~'"[^"]*"'
braced           =  '{' (quoted / braced / braced_text)* brace_end
braced_text      =  ~'[^{}"]+'
brace_end        =  '}'

###  NAMES

tag_name         =  ~"[A-Za-z0-9_-]+"
attr_name        =  ~"[A-Za-z0-9_-]+"
close_name       =  ~"[A-Za-z0-9_-]+"

###  WHITESPACE & COMMENTS

skip             =  (~r"\s+" / comment)*
comment          =  ~r"<!--.*?(-->|\Z)"s
end              =  ~r"\Z"

"""
