"""
Default keyword table for relevance scoring.

Each category maps to a weight and a tuple of phrases. Matching is a
case-insensitive substring test, so short phrases ("ai", "pi") deliberately
match inside longer words; the scorer is a coarse inclusion heuristic.
"""
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class KeywordCategory:
    """A weighted group of keyword phrases."""
    weight: int
    keywords: Tuple[str, ...]


DEFAULT_KEYWORD_CATEGORIES: Dict[str, KeywordCategory] = {
    "primary_ai": KeywordCategory(weight=3, keywords=(
        'artificial intelligence', 'AI', 'machine learning', 'deep learning',
        'neural networks', 'LLM', 'large language models', 'generative AI',
        'computer vision', 'reinforcement learning', 'NLP', 'natural language processing',
        'AGI', 'artificial general intelligence', 'foundation models', 'transformer models',
        'diffusion models', 'autoregressive models', 'attention mechanisms',
        'neural architecture search', 'federated learning', 'transfer learning',
        'few-shot learning', 'zero-shot learning', 'in-context learning',
        'multimodal AI', 'vision-language models', 'text-to-image', 'text-to-video',
        'speech recognition', 'speech synthesis', 'robotics AI', 'autonomous systems',
    )),
    # Company and model names weigh the most
    "companies": KeywordCategory(weight=4, keywords=(
        'OpenAI', 'ChatGPT', 'GPT-4', 'GPT-5', 'GPT-4o', 'o1', 'o3', 'DALL-E',
        'Claude', 'Anthropic', 'Claude 3', 'Claude 4', 'Constitutional AI',
        'Gemini', 'Bard', 'PaLM', 'LaMDA', 'Flamingo', 'Sparrow',
        'DeepMind', 'Google AI', 'Google Brain', 'Vertex AI',
        'Meta AI', 'LLaMA', 'LLaMA 2', 'LLaMA 3', 'Make-A-Video', 'BlenderBot',
        'xAI', 'Grok', 'Elon Musk',
        'Microsoft', 'Copilot', 'Azure OpenAI', 'Bing Chat',
        'Amazon', 'Alexa', 'Bedrock', 'CodeWhisperer', 'Titan',
        'Inflection AI', 'Pi', 'Inflection-2.5',
        'Mistral AI', 'Mixtral', 'Codestral',
        'Stability AI', 'Stable Diffusion', 'SDXL',
        'Midjourney', 'RunwayML', 'Pika Labs',
        'Hugging Face', 'Transformers', 'Datasets',
        'Cohere', 'Command', 'Embed',
        'AI21 Labs', 'Jurassic', 'Wordtune',
        'Character.AI', 'Replika', 'Jasper',
        'Scale AI', 'Databricks', 'MLflow',
        'NVIDIA', 'Omniverse', 'NeMo', 'TensorRT-LLM',
        'Intel', 'Habana Labs', 'Gaudi',
        'AMD', 'ROCm', 'Instinct',
        'Cerebras', 'Wafer Scale Engine',
        'SambaNova', 'DataFlow',
        'Graphcore', 'IPU', 'Poplar',
    )),
    "startups": KeywordCategory(weight=2, keywords=(
        'Perplexity', 'You.com', 'Phind',
        'Harvey', 'Casetext', 'DoNotPay',
        'Adept', 'ACT-1', 'Rabbit', 'R1',
        'Eleven Labs', 'Murf', 'Synthesia',
        'Runway', 'Pika', 'Luma AI',
        'Magic', 'Tabnine', 'GitHub Copilot',
        'Replit', 'Ghostwriter', 'Cursor',
        'Notion AI', 'Gamma', 'Tome',
        'Otter.ai', 'Fireflies', 'Grain',
        'Loom', 'Descript', 'Resemble',
        'Copy.ai', 'Writesonic', 'Grammarly',
    )),
    "industry": KeywordCategory(weight=2, keywords=(
        'AI regulation', 'AI policy', 'AI ethics', 'AI investment', 'AI funding',
        'AI startups', 'AI acquisition', 'AI merger', 'AI strategy', 'AI layoffs', 'AI hiring',
        'AI IPO', 'VC funding', 'AI in enterprise', 'AI transformation',
        'AI winter', 'AI summer', 'AI bubble', 'AI hype cycle',
        'AI-first company', 'AI native', 'AI adoption', 'AI integration',
        'AI ROI', 'AI productivity', 'AI automation', 'job displacement',
        'AI skills gap', 'AI talent', 'AI recruiting', 'AI consulting',
        'AI as a service', 'AIaaS', 'MLaaS', 'API economy',
        'edge computing', 'cloud AI', 'AI infrastructure',
        'model deployment', 'MLOps', 'AI governance',
    )),
    "tech_stack": KeywordCategory(weight=2, keywords=(
        'AI chips', 'GPUs', 'TPUs', 'NPUs', 'ASIC', 'FPGA',
        'CUDA', 'ROCm', 'OpenCL', 'TensorRT', 'ONNX',
        'PyTorch', 'TensorFlow', 'JAX', 'Flax', 'Keras',
        'Transformers', 'Diffusers', 'LangChain', 'LlamaIndex',
        'model compression', 'quantization', 'pruning', 'distillation',
        'fine-tuning', 'PEFT', 'LoRA', 'QLoRA', 'adapters',
        'open-source models', 'closed-source models', 'model weights',
        'inference', 'serving', 'batching', 'caching',
        'multimodal', 'cross-modal', 'vision-language',
        'edge AI', 'mobile AI', 'on-device inference',
        'RLHF', 'Constitutional AI', 'DPO', 'PPO',
        'vector database', 'Pinecone', 'Weaviate', 'Chroma',
        'retrieval augmented generation', 'RAG', 'knowledge graphs',
        'embeddings', 'sentence transformers', 'semantic search',
        'prompt engineering', 'prompt injection', 'jailbreaking',
        'agentic workflows', 'AI agents', 'tool use', 'function calling',
        'context length', 'context window', 'memory mechanisms',
        'hallucination detection', 'factual grounding', 'citations',
    )),
    "policy": KeywordCategory(weight=2, keywords=(
        'AI bias', 'algorithmic bias', 'fairness', 'algorithmic fairness',
        'AI hallucination', 'AI transparency', 'explainable AI', 'XAI',
        'AI accountability', 'AI liability', 'AI responsibility',
        'surveillance', 'facial recognition', 'biometric identification',
        'misinformation', 'disinformation', 'deepfakes', 'synthetic media',
        'AI safety', 'AI alignment', 'AI risk', 'existential risk',
        'AI governance', 'AI oversight', 'AI auditing',
        'open-source', 'closed-source', 'model cards', 'AI documentation',
        'privacy', 'data protection', 'GDPR', 'AI Act',
        'algorithmic impact assessment', 'AI impact assessment',
        'human oversight', 'human-in-the-loop', 'human-AI collaboration',
        'AI rights', 'digital rights', 'algorithmic justice',
    )),
    "geopolitics": KeywordCategory(weight=3, keywords=(
        'AI arms race', 'AI warfare', 'autonomous weapons', 'lethal autonomous weapons',
        'military AI', 'defense AI', 'DARPA', 'DIU', 'CDAO',
        'China AI', 'US-China AI competition', 'tech decoupling',
        'AI sanctions', 'chip export restrictions', 'semiconductor controls',
        'AI cold war', 'technological sovereignty', 'AI supply chain',
        'national AI strategy', 'AI competitiveness', 'AI leadership',
        'dual-use technology', 'export controls', 'foreign investment screening',
        'AI espionage', 'intellectual property theft', 'technology transfer',
        'critical infrastructure', 'cybersecurity AI', 'AI vulnerabilities',
    )),
    "research": KeywordCategory(weight=2, keywords=(
        'NeurIPS', 'ICML', 'ICLR', 'AAAI', 'IJCAI', 'ACL', 'EMNLP',
        'arXiv', 'research paper', 'peer review', 'reproducibility',
        'benchmark', 'evaluation', 'leaderboard', 'GLUE', 'SuperGLUE',
        'HELM', 'BIG-bench', 'MMLU', 'HumanEval', 'GSM8K',
        'scaling laws', 'emergent abilities', 'phase transitions',
        'in-context learning', 'chain-of-thought', 'reasoning',
        'alignment research', 'interpretability', 'mechanistic interpretability',
        'AI safety research', 'robustness', 'adversarial examples',
        'uncertainty quantification', 'calibration', 'out-of-distribution',
    )),
    "applications": KeywordCategory(weight=2, keywords=(
        'healthcare AI', 'medical AI', 'drug discovery', 'radiology AI',
        'fintech AI', 'algorithmic trading', 'fraud detection', 'robo-advisors',
        'legal AI', 'legal tech', 'contract analysis', 'e-discovery',
        'education AI', 'edtech', 'personalized learning', 'tutoring AI',
        'autonomous vehicles', 'self-driving cars', 'ADAS', 'robotics',
        'manufacturing AI', 'industrial AI', 'predictive maintenance',
        'retail AI', 'recommendation systems', 'personalization',
        'content creation', 'creative AI', 'AI art', 'AI music',
        'customer service AI', 'chatbots', 'virtual assistants',
        'search AI', 'information retrieval', 'knowledge management',
        'cybersecurity AI', 'threat detection', 'anomaly detection',
        'climate AI', 'sustainability AI', 'smart cities', 'IoT AI',
    )),
    "finance": KeywordCategory(weight=2, keywords=(
        'AI market size', 'AI revenue', 'AI valuation', 'AI unicorn',
        'AI venture capital', 'AI private equity', 'AI public markets',
        'AI stock performance', 'AI ETF', 'AI index',
        'compute costs', 'training costs', 'inference costs',
        'GPU shortage', 'chip shortage', 'semiconductor supply',
        'AI licensing', 'API pricing', 'subscription models',
        'freemium AI', 'enterprise AI pricing', 'usage-based pricing',
    )),
    "talent": KeywordCategory(weight=2, keywords=(
        'AI engineer', 'ML engineer', 'data scientist', 'AI researcher',
        'prompt engineer', 'AI trainer', 'AI safety engineer',
        'AI product manager', 'AI ethics officer', 'AI governance',
        'AI talent shortage', 'AI skills', 'AI education', 'AI bootcamp',
        'AI certification', 'upskilling', 'reskilling', 'AI literacy',
        'remote AI work', 'AI freelancing', 'AI consulting',
        'AI hiring trends', 'AI salary', 'AI compensation',
    )),
    "vibe_coding": KeywordCategory(weight=2, keywords=(
        'vibe coding', 'vibes-based programming', 'intuitive coding',
        'AI-assisted coding', 'pair programming with AI', 'AI code generation',
        'conversational programming', 'natural language programming',
        'code completion', 'intelligent autocomplete', 'contextual suggestions',
        'AI code review', 'automated refactoring', 'code optimization',
        'GitHub Copilot', 'CodeT5', 'CodeGen', 'InCoder', 'SantaCoder',
        'Tabnine', 'Kite', 'DeepCode', 'Sourcery', 'Amazon CodeGuru',
        'Replit Ghostwriter', 'Cursor IDE', 'Continue', 'Codeium',
        'programming productivity', 'developer experience', 'DX',
        'low-code', 'no-code', 'visual programming', 'drag-and-drop development',
        'prompt-driven development', 'specification programming',
        'AI debugging', 'error explanation', 'stack overflow alternative',
        'code documentation generation', 'README generation',
        'test generation', 'automated testing', 'AI QA',
    )),
    "business_models": KeywordCategory(weight=2, keywords=(
        'AI-first business', 'AI-native company', 'AI transformation',
        'AI wrapper', 'thin wrapper', 'AI aggregator', 'AI middleware',
        'AI infrastructure play', 'picks and shovels', 'AI tooling',
        'freemium AI', 'usage-based pricing', 'token-based pricing',
        'compute arbitrage', 'API reselling', 'white-label AI',
        'AI consulting', 'AI implementation services', 'AI training services',
        'AI-powered SaaS', 'vertical AI', 'horizontal AI platform',
        'AI marketplace', 'model marketplace', 'AI app store',
        'subscription AI', 'enterprise AI licensing', 'seat-based pricing',
        'AI revenue model', 'AI unit economics', 'AI customer acquisition',
        'AI moat', 'defensible AI business', 'network effects',
        'data moat', 'proprietary data', 'data flywheel',
        'AI competitive advantage', 'AI differentiation',
        'build vs buy AI', 'make vs buy decision',
        'AI vendor selection', 'AI procurement', 'AI RFP',
    )),
    "indie_ai": KeywordCategory(weight=2, keywords=(
        'indie hacker AI', 'solo AI builder', 'one-person AI startup',
        'AI side project', 'weekend AI project', 'micro AI startup',
        'AI MVP', 'AI prototype', 'AI proof of concept',
        'ProductHunt AI', 'Indie Hackers AI', 'Hacker News AI',
        'AI builder community', 'AI maker', 'solo founder AI',
        'bootstrapped AI', 'self-funded AI', 'ramen profitable AI',
        'AI lifestyle business', 'AI passion project',
        'Twitter AI builder', 'AI influencer', 'AI content creator',
        'AI newsletter', 'AI blog', 'AI course creator',
        'no-code AI tools', 'drag-and-drop AI', 'citizen developer',
        'AI automation', 'workflow automation', 'Zapier AI integration',
        'AI Chrome extension', 'browser AI', 'AI bookmarklet',
    )),
    "culture": KeywordCategory(weight=2, keywords=(
        'AI Twitter', 'AI influencer', 'AI thought leader',
        'AI memes', 'AI jokes', 'AI humor', 'AI culture',
        'ship fast AI', 'move fast and break things',
        'AI demo day', 'AI showcase', 'AI hackathon',
        'AI meetup', 'AI conference', 'AI workshop',
        'open source AI', 'AI collaboration', 'AI community',
        'AI Discord', 'AI Slack', 'AI Reddit', 'r/MachineLearning',
        'AI YouTube', 'AI TikTok', 'AI LinkedIn',
        'AI podcast', 'AI interview', 'AI debate',
        'AGI timeline', 'AI predictions', 'AI speculation',
        'AI doomer', 'AI optimist', 'AI accelerationist',
        'e/acc', 'effective accelerationism', 'AI safety vs progress',
        'AI art controversy', 'AI copyright debate',
        'AI replacing jobs', 'AI augmenting humans',
    )),
    "coding_tools": KeywordCategory(weight=2, keywords=(
        'VSCode AI', 'JetBrains AI', 'Vim AI', 'Emacs AI',
        'cloud IDE', 'browser-based coding', 'collaborative coding',
        'Replit', 'CodeSandbox', 'Gitpod', 'GitHub Codespaces',
        'AI terminal', 'command line AI', 'shell AI',
        'Warp terminal', 'Fig autocomplete', 'AI bash completion',
        'code search', 'semantic code search', 'natural language queries',
        'Sourcegraph', 'GitHub search', 'grep alternative',
        'AI code explanation', 'code understanding', 'legacy code analysis',
        'documentation AI', 'API documentation', 'code comments',
        'commit message generation', 'git AI', 'version control AI',
        'pull request AI', 'code review automation',
        'deployment AI', 'DevOps AI', 'infrastructure as code',
    )),
}

# Categories whose phrases make up the search-API query
SEARCH_QUERY_CATEGORIES = ("primary_ai", "companies")
